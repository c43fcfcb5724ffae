"""API request and response schemas."""

from src.portal.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    SignupRequest,
    SignupResponse,
    TokenPair,
    VerifyEmailRequest,
)
from src.portal.schemas.channel import (
    ChannelAccess,
    ChannelCreate,
    ChannelPermissionRead,
    ChannelPermissionsUpdate,
    ChannelRead,
    ChannelUpdate,
    MessageCreate,
    MessageRead,
    PermissionEntry,
)
from src.portal.schemas.env_var import (
    EnvVarCreate,
    EnvVarRead,
    EnvVarUpdate,
    UserEnvVarCreate,
    UserEnvVarRead,
    UserEnvVarUpdate,
)
from src.portal.schemas.milestone import (
    MilestoneCreate,
    MilestoneLock,
    MilestoneRead,
    MilestoneUpdate,
)
from src.portal.schemas.notification import MarkAllReadResponse, NotificationRead, UnreadCount
from src.portal.schemas.page import ChatPage, EnvVarGroup, EnvVarsPage
from src.portal.schemas.pagination import PaginatedResponse, decode_cursor, encode_cursor
from src.portal.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.portal.schemas.tenant import (
    InvitationAccept,
    InvitationResponse,
    MemberInvite,
    MemberRead,
    MemberRoleUpdate,
    TenantDetail,
    TenantRead,
    TenantUpdate,
)
from src.portal.schemas.user import PasswordChange, ProfileUpdate, UserRead
from src.portal.schemas.work_item import (
    AssignUsers,
    BugCreate,
    BugRead,
    BugUpdate,
    FeatureCreate,
    FeatureRead,
    FeatureUpdate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
    VoteResponse,
    WorkItemRead,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "LogoutRequest",
    "MessageResponse",
    "RefreshRequest",
    "SignupRequest",
    "SignupResponse",
    "TokenPair",
    "VerifyEmailRequest",
    # Users
    "PasswordChange",
    "ProfileUpdate",
    "UserEnvVarCreate",
    "UserEnvVarRead",
    "UserEnvVarUpdate",
    "UserRead",
    # Notifications
    "MarkAllReadResponse",
    "NotificationRead",
    "UnreadCount",
    # Tenants
    "InvitationAccept",
    "InvitationResponse",
    "MemberInvite",
    "MemberRead",
    "MemberRoleUpdate",
    "TenantDetail",
    "TenantRead",
    "TenantUpdate",
    # Projects and env vars
    "EnvVarCreate",
    "EnvVarRead",
    "EnvVarUpdate",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    # Work items
    "AssignUsers",
    "BugCreate",
    "BugRead",
    "BugUpdate",
    "FeatureCreate",
    "FeatureRead",
    "FeatureUpdate",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "VoteResponse",
    "WorkItemRead",
    # Milestones
    "MilestoneCreate",
    "MilestoneLock",
    "MilestoneRead",
    "MilestoneUpdate",
    # Channels
    "ChannelAccess",
    "ChannelCreate",
    "ChannelPermissionRead",
    "ChannelPermissionsUpdate",
    "ChannelRead",
    "ChannelUpdate",
    "MessageCreate",
    "MessageRead",
    "PermissionEntry",
    # Pages
    "ChatPage",
    "EnvVarGroup",
    "EnvVarsPage",
    # Pagination
    "PaginatedResponse",
    "decode_cursor",
    "encode_cursor",
]
