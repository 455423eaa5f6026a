import pytest
from cloudtree.config import load_settings, DEFAULT_BASE_URL, DEFAULT_PORT


def test_defaults():
    settings = load_settings({})

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.port == DEFAULT_PORT
    assert settings.timeout is None
    assert settings.apikey == ""
    assert settings.log_file is None

def test_environment_overrides():
    settings = load_settings({
        "CLOUDTREE_BASE_URL": "https://files.example.com/api",
        "CLOUDTREE_APIKEY": "abc",
        "CLOUDTREE_TIMEOUT": "2.5",
        "CLOUDTREE_PORT": "9000",
        "CLOUDTREE_LOG_LEVEL": "DEBUG",
    })

    assert settings.base_url == "https://files.example.com/api"
    assert settings.apikey == "abc"
    assert settings.timeout == 2.5
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"

def test_invalid_port():
    with pytest.raises(ValueError):
        load_settings({"CLOUDTREE_PORT": "eighty"})
