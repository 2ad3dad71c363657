"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.clients.aws import DynamoDBClient, SessionProvider
from infrastructure.clients.fcm import FcmGateway
from infrastructure.configuration import Settings
from infrastructure.events import dispatch_event
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    DeliveryClient,
    NotificationCategory,
    PayloadBuilder,
    PushGateway,
    SystemClock,
)
from infrastructure.persistence import (
    DeliveryStore,
    DynamoDBDeliveryStore,
    InMemoryDeliveryStore,
)
from infrastructure.security.jwks import JWKSManager

logger = get_module_logger()


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process.

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/version")
        def version(settings: SettingsDep):
            return {"version": settings.GIT_SHA}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_jwks_manager() -> JWKSManager:
    """
    Get application-scoped JWKSManager singleton.

    An empty ISSUER_CONFIG yields a manager that trusts no issuer, so every
    bearer token is refused.
    """
    settings = get_settings()
    issuer_config = settings.server.ISSUER_CONFIG
    if not issuer_config:
        logger.warning("issuer_config_empty")
    manager = JWKSManager(issuer_config=issuer_config)
    logger.info("jwks_manager_initialized", issuers=manager.trusted_issuers)
    return manager


@lru_cache
def get_store() -> DeliveryStore:
    """Provider for the durable store selected by STORE_BACKEND.

    The in-memory store publishes request creation to the event registry,
    standing in for the DynamoDB stream.
    """
    settings = get_settings()
    if settings.store.STORE_BACKEND == "memory":
        store = InMemoryDeliveryStore()
        store.subscribe(dispatch_event)
        logger.info("delivery_store_initialized", backend="memory")
        return store

    session_provider = SessionProvider(
        region=settings.aws.AWS_REGION,
        endpoint_url=settings.aws.DYNAMODB_ENDPOINT_URL,
    )
    return DynamoDBDeliveryStore(
        DynamoDBClient(session_provider),
        requests_table=settings.store.NOTIFICATION_REQUESTS_TABLE,
        sent_log_table=settings.store.SENT_NOTIFICATIONS_TABLE,
        owner_table=settings.store.OWNER_NOTIFICATIONS_TABLE,
    )


@lru_cache
def get_push_gateway() -> PushGateway:
    """Provider for the FCM HTTP v1 gateway."""
    settings = get_settings()
    return FcmGateway(
        project_id=settings.fcm.FCM_PROJECT_ID,
        credentials_json=settings.fcm.FCM_CREDENTIALS_JSON,
        api_url=settings.fcm.FCM_API_URL,
        timeout_seconds=settings.fcm.FCM_TIMEOUT_SECONDS,
    )


@lru_cache
def get_orchestrator():
    """Provider for the dispatch orchestrator wired with gateway, store and clock.

    Returns:
        DispatchOrchestrator: Cached orchestrator instance.
    """
    # Deferred: modules.dispatch builds on infrastructure
    from modules.dispatch.orchestrator import DispatchOrchestrator

    settings = get_settings()
    clock = SystemClock()
    default_category = NotificationCategory.parse(
        settings.dispatch.DEFAULT_CATEGORY, NotificationCategory.GENERIC
    )
    return DispatchOrchestrator(
        delivery_client=DeliveryClient(get_push_gateway()),
        store=get_store(),
        clock=clock,
        builder=PayloadBuilder(
            android_ttl_ms=settings.dispatch.ANDROID_TTL_MS, clock=clock
        ),
        default_category=default_category,
    )
