from core.db import db
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_babel import Babel
from flask_smorest import Api

migrate = Migrate()
login_manager = LoginManager()
# API only: anonymous callers get a JSON 401 from the views instead of a redirect.
login_manager.login_view = None
babel = Babel()
api = Api()

login_manager.login_message = None


@login_manager.user_loader
def load_user(user_id):
    from core.models.user import User

    if not isinstance(user_id, str) or not user_id:
        return None
    return db.session.get(User, user_id)
