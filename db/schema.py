# SQL schema for the milestone ledger database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Users (one record per principal, role fixed at registration)
CREATE TABLE IF NOT EXISTS users (
    principal TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    role INTEGER NOT NULL CHECK(role BETWEEN 1 AND 4),
    registered_at INTEGER NOT NULL
);

-- Guardian -> child links
CREATE TABLE IF NOT EXISTS relationships (
    guardian TEXT NOT NULL,
    child TEXT NOT NULL,
    kind TEXT NOT NULL CHECK(kind IN ('parent-child', 'educator-child')),
    created_at INTEGER NOT NULL,
    PRIMARY KEY (guardian, child),
    FOREIGN KEY (guardian) REFERENCES users (principal),
    FOREIGN KEY (child) REFERENCES users (principal)
);

-- Forests
CREATE TABLE IF NOT EXISTS forests (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT NOT NULL,
    creator TEXT NOT NULL,
    created_at INTEGER NOT NULL
);

-- Milestones (parent_milestone_id is display nesting only)
CREATE TABLE IF NOT EXISTS milestones (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    category TEXT NOT NULL,
    difficulty INTEGER NOT NULL CHECK(difficulty BETWEEN 1 AND 5),
    forest_id INTEGER NOT NULL,
    parent_milestone_id INTEGER,
    creator TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    FOREIGN KEY (forest_id) REFERENCES forests (id),
    FOREIGN KEY (parent_milestone_id) REFERENCES milestones (id)
);

-- Prerequisite edges
CREATE TABLE IF NOT EXISTS milestone_prerequisites (
    milestone_id INTEGER NOT NULL,
    prerequisite_id INTEGER NOT NULL,
    created_at INTEGER NOT NULL,
    PRIMARY KEY (milestone_id, prerequisite_id),
    CHECK(milestone_id != prerequisite_id),
    FOREIGN KEY (milestone_id) REFERENCES milestones (id),
    FOREIGN KEY (prerequisite_id) REFERENCES milestones (id)
);

-- Completion records (terminal, one per milestone/user)
CREATE TABLE IF NOT EXISTS completions (
    milestone_id INTEGER NOT NULL,
    user_principal TEXT NOT NULL,
    completed_at INTEGER NOT NULL,
    verifier TEXT NOT NULL,
    evidence_url TEXT,
    PRIMARY KEY (milestone_id, user_principal),
    FOREIGN KEY (milestone_id) REFERENCES milestones (id)
);

-- Monotonic counters: last value handed out
CREATE TABLE IF NOT EXISTS counters (
    name TEXT PRIMARY KEY,
    value INTEGER NOT NULL DEFAULT 0
);
"""

# Counters seeded on init; ids start at 1
COUNTER_NAMES = ("forest", "milestone", "height")

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_milestones_forest ON milestones (forest_id);
CREATE INDEX IF NOT EXISTS idx_milestones_parent ON milestones (parent_milestone_id);
CREATE INDEX IF NOT EXISTS idx_completions_user ON completions (user_principal);
"""
