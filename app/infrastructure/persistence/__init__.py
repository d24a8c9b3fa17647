"""SQLAlchemy persistence: engine, sessions, models, repositories, migrations."""
