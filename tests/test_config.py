import pytest
from sqlalchemy import text

from vastraverse.config import DEFAULT_JWT_SECRET, AppConfig, Config


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'env.db'}")
    monkeypatch.setenv("ADMIN_EMAILS", "Boss@Example.com, ops@example.com")
    monkeypatch.setenv("JWT_EXPIRATION_DAYS", "3")
    monkeypatch.setenv("DEBUG", "true")

    config = Config.from_env(dotenv_path=str(tmp_path / "missing.env"))

    assert config.database.url.endswith("env.db")
    assert config.security.admin_emails == ["boss@example.com", "ops@example.com"]
    assert config.security.jwt_expiration_days == 3
    assert config.app.debug is True


def test_production_requires_real_secret():
    config = Config(app=AppConfig(environment="production"))
    assert config.security.jwt_secret_key == DEFAULT_JWT_SECRET
    with pytest.raises(ValueError):
        config.validate()


def test_seed_command_is_idempotent(app, services):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed"])
    second = runner.invoke(args=["seed"])
    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output

    with services.engine.connect() as conn:
        products = conn.execute(text("SELECT COUNT(*) FROM products")).scalar()
        admins = conn.execute(text("SELECT COUNT(*) FROM users WHERE role = 'admin'")).scalar()
    assert products == 6
    assert admins == 1
