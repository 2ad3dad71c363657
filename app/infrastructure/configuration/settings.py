"""Push dispatch configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import AwsSettings, FcmSettings

# Feature settings
from infrastructure.configuration.features import DispatchSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import ServerSettings, StoreSettings


class Settings(BaseSettings):
    """Push dispatch configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: External service configurations (AWS, FCM)
    - **Features**: Dispatch behaviour (shared secret, TTL, default category)
    - **Infrastructure**: Core system configurations (store, server)

    Environment Variables:
        PREFIX: Environment prefix; empty in production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        region = settings.aws.AWS_REGION
        if settings.store.STORE_BACKEND == "memory":
            ...
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    # Integration settings
    aws: AwsSettings
    fcm: FcmSettings

    # Feature settings
    dispatch: DispatchSettings

    # Infrastructure settings
    server: ServerSettings
    store: StoreSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "aws": AwsSettings,
            "fcm": FcmSettings,
            # Features
            "dispatch": DispatchSettings,
            # Infrastructure
            "server": ServerSettings,
            "store": StoreSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
