import pytest

from media_resolver.services.mappers import _MAPPER_REGISTRY, get_mapper, register_mapper, registered_platforms
from media_resolver.services.platform_detector import Platform
from media_resolver.services.provider_client import supported_platforms


@pytest.fixture(autouse=True)
def clean_registry():
    """Remove test mappers from registry after each test."""
    yield
    _MAPPER_REGISTRY.pop(Platform.WEISHI, None)


def test_every_provider_platform_has_a_mapper():
    assert set(supported_platforms()) <= set(registered_platforms())


def test_register_and_get_mapper():
    @register_mapper(Platform.WEISHI)
    def fake(data):
        return "mapped"

    assert get_mapper(Platform.WEISHI) is fake
    assert get_mapper(Platform.WEISHI)({}) == "mapped"


def test_get_unregistered_raises():
    with pytest.raises(KeyError):
        get_mapper(Platform.UNKNOWN)


def test_duplicate_registration_raises():
    with pytest.raises(ValueError, match="already registered"):
        register_mapper(Platform.DOUYIN)(lambda data: None)
