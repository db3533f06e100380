# tests/test_settings.py
from campus_groups.core.settings import Settings


def test_sync_url_is_the_effective_url() -> None:
    settings = Settings(
        SECRET_KEY="k",
        DATABASE_URL="postgresql+asyncpg://db/groups",
        TEST_DATABASE_URL="sqlite:///./test.db",
        USE_TEST_DATABASE=False,
    )
    assert settings.database_url_sync == "postgresql+asyncpg://db/groups"

    testing = Settings(
        SECRET_KEY="k",
        DATABASE_URL="sqlite:///./app.db",
        TEST_DATABASE_URL="sqlite:///./test.db",
        USE_TEST_DATABASE=True,
    )
    assert testing.database_url_sync == "sqlite:///./test.db"
