from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()

# Storage backend comes from RATELIMIT_STORAGE_URI (in-memory by default).
limiter = Limiter(get_remote_address)
