"""Basic import tests to verify package structure."""


def test_import_package():
    """Test that the main package can be imported."""
    from lingua_bridge import tutor

    assert tutor.__version__ == "0.1.0"


def test_lazy_server_app():
    """The ASGI app is importable through the package namespace."""
    from lingua_bridge import tutor
    from lingua_bridge.tutor.server.app import app

    assert tutor.server_app is app
