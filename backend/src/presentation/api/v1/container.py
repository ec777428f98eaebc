"""
Dependency Injection Container
Manages service and repository instances
"""
from typing import Optional

import socketio
from fastapi import BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db, get_db_session
from application.repositories.interfaces import (
    IJobRepository,
    IMatchRepository,
    INotificationRepository,
    IUserRepository,
)
from application.services.auth.interfaces import IAuthService, IJwtService, IPasswordHasher
from application.services.jobs import JobService
from application.services.matching import IMatchService
from application.services.matching.expiry import MatchExpirySweeper
from application.services.notifications import (
    INotificationDelivery,
    INotificationDispatcher,
    INotificationService,
)
from application.services.realtime import IConnectionRegistry
from application.services.similarity import ISimilarityService
from infrastructure.notifications import BackgroundTaskNotificationDispatcher, NotificationDeliveryService
from infrastructure.persistence.repositories.job import SQLAlchemyJobRepository
from infrastructure.persistence.repositories.match import SQLAlchemyMatchRepository
from infrastructure.persistence.repositories.notification import SQLAlchemyNotificationRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.realtime import SocketIOConnectionRegistry, create_socket_server
from infrastructure.security import BcryptPasswordHasher, JwtService
from infrastructure.services.tfidf_similarity_service import TfidfSimilarityService


# Singleton instances
_password_hasher: Optional[IPasswordHasher] = None
_jwt_service: Optional[IJwtService] = None
_similarity_service: Optional[ISimilarityService] = None
_socket_server: Optional[socketio.AsyncServer] = None
_connection_registry: Optional[IConnectionRegistry] = None
_notification_delivery: Optional[INotificationDelivery] = None


def get_password_hasher() -> IPasswordHasher:
    """Get password hasher instance (singleton)"""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher()
    return _password_hasher


def get_jwt_service() -> IJwtService:
    """Get JWT service instance (singleton)"""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JwtService()
    return _jwt_service


def get_similarity_service() -> ISimilarityService:
    """Get similarity engine instance (singleton)"""
    global _similarity_service
    if _similarity_service is None:
        _similarity_service = TfidfSimilarityService()
    return _similarity_service


def get_socket_server() -> socketio.AsyncServer:
    """Get Socket.IO server (singleton)"""
    global _socket_server
    if _socket_server is None:
        _socket_server = create_socket_server()
    return _socket_server


def get_connection_registry() -> IConnectionRegistry:
    """Get connection registry (singleton)"""
    global _connection_registry
    if _connection_registry is None:
        _connection_registry = SocketIOConnectionRegistry(get_socket_server())
    return _connection_registry


def get_notification_delivery() -> INotificationDelivery:
    """Get notification delivery (singleton, opens its own sessions)"""
    global _notification_delivery
    if _notification_delivery is None:
        _notification_delivery = NotificationDeliveryService(
            session_scope=get_db_session,
            registry=get_connection_registry(),
            max_retries=settings.NOTIFICATION_MAX_RETRIES,
            retry_base_seconds=settings.NOTIFICATION_RETRY_BASE_SECONDS,
        )
    return _notification_delivery


def get_user_repository(
    session: AsyncSession = Depends(get_db)
) -> IUserRepository:
    """Get user repository instance (per-request)"""
    return SQLAlchemyUserRepository(session)


def get_job_repository(
    session: AsyncSession = Depends(get_db)
) -> IJobRepository:
    """Get job repository instance (per-request)"""
    return SQLAlchemyJobRepository(session)


def get_match_repository(
    session: AsyncSession = Depends(get_db)
) -> IMatchRepository:
    """Get match repository instance (per-request)"""
    return SQLAlchemyMatchRepository(session)


def get_notification_repository(
    session: AsyncSession = Depends(get_db)
) -> INotificationRepository:
    """Get notification repository instance (per-request)"""
    return SQLAlchemyNotificationRepository(session)


def get_notification_dispatcher(
    background_tasks: BackgroundTasks,
    delivery: INotificationDelivery = Depends(get_notification_delivery)
) -> INotificationDispatcher:
    """Notifications raised by a request are delivered after its response"""
    return BackgroundTaskNotificationDispatcher(background_tasks, delivery)


def get_auth_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    jwt_service: IJwtService = Depends(get_jwt_service)
) -> IAuthService:
    """Get auth service instance (per-request)"""
    from application.services.auth.impl import AuthService
    return AuthService(user_repo, password_hasher, jwt_service)


def get_job_service(
    job_repo: IJobRepository = Depends(get_job_repository)
) -> JobService:
    """Get job service instance (per-request)"""
    return JobService(job_repo)


def get_match_service(
    match_repo: IMatchRepository = Depends(get_match_repository),
    job_repo: IJobRepository = Depends(get_job_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
    similarity: ISimilarityService = Depends(get_similarity_service),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher)
) -> IMatchService:
    """Get match service instance (per-request)"""
    from application.services.matching.impl import MatchService
    return MatchService(
        match_repo,
        job_repo,
        user_repo,
        similarity,
        dispatcher,
        default_ttl_hours=settings.MATCH_DEFAULT_TTL_HOURS,
        max_page_size=settings.MATCH_LIST_MAX_LIMIT,
    )


def get_notification_service(
    notification_repo: INotificationRepository = Depends(get_notification_repository)
) -> INotificationService:
    """Get notification service instance (per-request)"""
    from application.services.notifications.impl import NotificationService
    return NotificationService(notification_repo)


def _match_service_for_session(session: AsyncSession, dispatcher: INotificationDispatcher) -> IMatchService:
    from application.services.matching.impl import MatchService
    return MatchService(
        SQLAlchemyMatchRepository(session),
        SQLAlchemyJobRepository(session),
        SQLAlchemyUserRepository(session),
        get_similarity_service(),
        dispatcher,
        default_ttl_hours=settings.MATCH_DEFAULT_TTL_HOURS,
        max_page_size=settings.MATCH_LIST_MAX_LIMIT,
    )


def build_expiry_sweeper() -> MatchExpirySweeper:
    """Background sweeper wired to the application's session factory"""
    return MatchExpirySweeper(
        session_scope=get_db_session,
        service_factory=_match_service_for_session,
        delivery=get_notification_delivery(),
        interval_seconds=settings.MATCH_EXPIRY_SWEEP_INTERVAL_SECONDS,
        batch_size=settings.MATCH_EXPIRY_SWEEP_BATCH_SIZE,
    )


async def authenticate_token(token: str):
    """Resolve a bearer token to a user outside of a request (socket handshakes)"""
    from application.services.auth.impl import AuthService
    async with get_db_session() as session:
        auth_service = AuthService(
            SQLAlchemyUserRepository(session),
            get_password_hasher(),
            get_jwt_service(),
        )
        return await auth_service.verify_access_token(token)
