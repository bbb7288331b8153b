import os

from conduit.config import get_settings
from conduit.tests.auth_helpers import TEST_JWT_SECRET

os.environ["CONDUIT_JWT_SECRET"] = TEST_JWT_SECRET
get_settings.cache_clear()
