"""Store Factory — wires the Domain Store to the SQL gateway at startup.

Invariants:
    - One DomainStore per process, built from one DatabaseSessionManager
    - Feed limit, notice capacity and default workspace color come from Settings
"""

from worksync.config import Settings
from worksync.core.notices import NoticeBoard
from worksync.infrastructure.database import DatabaseSessionManager
from worksync.infrastructure.gateway import SqlRemoteStore
from worksync.services.activity_logger import ActivityLogger
from worksync.services.domain_store import DomainStore
from worksync.services.workspace_bootstrapper import WorkspaceBootstrapper


def build_store(db: DatabaseSessionManager, settings: Settings) -> DomainStore:
    remote = SqlRemoteStore(db)
    return DomainStore(
        remote,
        ActivityLogger(remote.activities, limit=settings.activity_feed_limit),
        WorkspaceBootstrapper(remote.workspaces, default_color=settings.default_color),
        NoticeBoard(capacity=settings.notice_board_size),
    )
