from .blueprint import AuthEnforcedBlueprint

bp = AuthEnforcedBlueprint("api", __name__, description="Cerberus Shield API")

from . import auth  # noqa: E402,F401
from . import csrf_token  # noqa: E402,F401
from . import health  # noqa: E402,F401
from . import plans  # noqa: E402,F401
from . import protection  # noqa: E402,F401
from . import stats  # noqa: E402,F401
from . import subscription  # noqa: E402,F401
from . import threat_logs  # noqa: E402,F401
