pytest_plugins = ["docedit.testing.conftest"]
