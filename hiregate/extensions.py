from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from redis import Redis
from rq import Queue
from flask import current_app

# strip common RQ kwargs that are not valid for the function call
RQ_KEYS = {'job_timeout', 'timeout', 'at_front', 'depends_on', 'result_ttl', 'ttl', 'meta', 'description'}


class RQWrapper:
    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        url = app.config.get("REDIS_URL")
        if not url:
            # no redis configured (tests, local dev): run jobs inline
            self.redis = None
            self.queue = None
            return
        try:
            self.redis = Redis.from_url(url)
            self.queue = Queue("default", connection=self.redis)
        except Exception:
            app.logger.exception('Redis/RQ init failed, falling back to sync execution')
            self.redis = None
            self.queue = None

    def _run_sync(self, args, kwargs):
        func = args[0] if args else None
        func_args = args[1:] if len(args) > 1 else ()
        safe_kwargs = {k: v for k, v in kwargs.items() if k not in RQ_KEYS}
        if not func:
            return None
        try:
            return func(*func_args, **safe_kwargs)
        except Exception:
            current_app.logger.exception('Synchronous fallback execution of %s failed', getattr(func, '__name__', func))
            return None

    def enqueue(self, *args, **kwargs):
        # Prefer enqueueing to RQ if available, but fall back to calling
        # the function synchronously if Redis/RQ is not reachable.
        if not self.queue:
            return self._run_sync(args, kwargs)
        try:
            return self.queue.enqueue(*args, **kwargs)
        except Exception:
            current_app.logger.exception('RQ enqueue failed, falling back to sync execution')
            return self._run_sync(args, kwargs)


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
rq = RQWrapper()
