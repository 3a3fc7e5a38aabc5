from .user import Role, User, UserCreate
from .relationship import Relationship, RelationshipCreate, RelationshipKind
from .forest import Forest, ForestCreate
from .milestone import Milestone, MilestoneCreate, PrerequisiteCreate, PrerequisiteEdge
from .completion import Completion, CompletionCreate, SelfCompletionCreate

__all__ = [
    'Role', 'User', 'UserCreate',
    'Relationship', 'RelationshipCreate', 'RelationshipKind',
    'Forest', 'ForestCreate',
    'Milestone', 'MilestoneCreate', 'PrerequisiteCreate', 'PrerequisiteEdge',
    'Completion', 'CompletionCreate', 'SelfCompletionCreate',
]
