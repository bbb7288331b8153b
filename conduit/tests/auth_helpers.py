"""Bearer token helpers shared by the API tests."""

from conduit.auth import create_access_token
from conduit.config import Settings


TEST_JWT_SECRET = "conduit-test-secret"

TEST_SETTINGS = Settings(jwt_secret=TEST_JWT_SECRET)


def auth_headers(user_id: str = "user-1", **token_options) -> dict[str, str]:
    """Authorization header carrying a valid token for ``user_id``."""
    token = create_access_token(user_id, TEST_SETTINGS, **token_options)
    return {"Authorization": f"Bearer {token}"}
