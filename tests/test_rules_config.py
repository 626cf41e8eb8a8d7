from rulez.workflows.rules_config import DEFAULT_POLICY, RulesPolicy, env_bool, policy_from_env


def test_policy_from_env_overrides(monkeypatch):
    monkeypatch.setenv("RULEZ_RAW_BASE_URL", "https://mirror.example.com/")
    monkeypatch.setenv("RULEZ_RULES_REPO", "acme/rules")
    monkeypatch.setenv("RULEZ_RULES_BRANCH", "dev")
    monkeypatch.setenv("RULEZ_RULES_PATH", "rules")
    monkeypatch.setenv("RULEZ_SPECIAL_ORIGIN", "rules.example.org")
    monkeypatch.setenv("RULEZ_FETCH_TIMEOUT", "5")
    policy = policy_from_env()
    assert policy.raw_url("go") == "https://mirror.example.com/acme/rules/dev/rules/go.mdc"
    assert policy.special_origin == "rules.example.org"
    assert policy.timeout == 5.0


def test_policy_from_env_ignores_bad_values(monkeypatch):
    for name in ("RULEZ_RAW_BASE_URL", "RULEZ_RULES_REPO", "RULEZ_RULES_BRANCH", "RULEZ_RULES_PATH", "RULEZ_SPECIAL_ORIGIN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RULEZ_FETCH_TIMEOUT", "soon")
    policy = policy_from_env()
    assert policy == DEFAULT_POLICY


def test_zero_timeout_defers_to_transport(monkeypatch):
    monkeypatch.setenv("RULEZ_FETCH_TIMEOUT", "0")
    assert policy_from_env(RulesPolicy()).timeout is None


def test_env_bool(monkeypatch):
    monkeypatch.setenv("RULEZ_OFFLINE", "yes")
    assert env_bool("RULEZ_OFFLINE")
    monkeypatch.setenv("RULEZ_OFFLINE", "off")
    assert not env_bool("RULEZ_OFFLINE")
