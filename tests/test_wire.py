"""Tests for forward-compatible decoding of open wire types."""

from __future__ import annotations

import json

import pytest

from anthropic_wire.cache import EphemeralCacheControl, UnknownCacheControl
from anthropic_wire.codec import decode_cache_control, decode_source, decode_user_location, encode, to_wire
from anthropic_wire.content import Base64Source, UnknownSource
from anthropic_wire.errors import DecodeError
from anthropic_wire.tools import ApproximateLocation, UnknownUserLocation

# ================================================================== #
# CacheControl
# ================================================================== #


class TestCacheControl:
    def test_ephemeral(self):
        cache = decode_cache_control({"type": "ephemeral"})
        assert isinstance(cache, EphemeralCacheControl)
        assert cache.ttl is None
        assert cache.additional_properties == {}

    def test_ephemeral_with_ttl(self):
        cache = decode_cache_control('{"type": "ephemeral", "ttl": "1h"}')
        assert cache == EphemeralCacheControl(ttl="1h")

    def test_unknown_type_keeps_everything(self):
        fixture = {"type": "persistent", "scope": "org", "priority": 3, "note": None}
        cache = decode_cache_control(fixture)
        assert isinstance(cache, UnknownCacheControl)
        assert cache.type == "persistent"
        assert cache.additional_properties == {"scope": "org", "priority": 3, "note": None}
        assert json.loads(encode(cache)) == fixture

    def test_explicit_null_differs_from_absent(self):
        with_null = decode_cache_control({"type": "future", "limit": None})
        without = decode_cache_control({"type": "future"})
        assert "limit" in to_wire(with_null)
        assert "limit" not in to_wire(without)
        assert with_null != without

    def test_known_type_keeps_extra_keys(self):
        fixture = {"type": "ephemeral", "ttl": "5m", "region": "eu"}
        cache = decode_cache_control(fixture)
        assert isinstance(cache, EphemeralCacheControl)
        assert cache.additional_properties == {"region": "eu"}
        assert to_wire(cache) == fixture

    def test_nested_extra_values_are_untouched(self):
        fixture = {"type": "tiered", "tiers": [{"ttl": "5m", "weight": None}, {"ttl": "1h"}]}
        assert to_wire(decode_cache_control(fixture)) == fixture

    def test_constructed_unknown_with_extras(self):
        cache = UnknownCacheControl(type="future", level=2, flag=None)
        assert to_wire(cache) == {"type": "future", "level": 2, "flag": None}

    def test_extras_survive_replace(self):
        cache = decode_cache_control({"type": "future", "level": 2})
        changed = cache.replace(type="later")
        assert to_wire(changed) == {"type": "later", "level": 2}

    def test_missing_type_fails(self):
        with pytest.raises(DecodeError):
            decode_cache_control({"ttl": "5m"})


# ================================================================== #
# Source
# ================================================================== #


class TestSource:
    def test_base64(self):
        source = decode_source({"type": "base64", "media_type": "image/gif", "data": "R0lGOD"})
        assert source == Base64Source(media_type="image/gif", data="R0lGOD")

    def test_unknown_source(self):
        fixture = {"type": "content", "content": [{"type": "text", "text": "a"}], "extra": None}
        source = decode_source(fixture)
        assert isinstance(source, UnknownSource)
        assert source.type == "content"
        assert set(source.additional_properties) == {"content", "extra"}
        assert to_wire(source) == fixture

    def test_known_source_missing_field(self):
        with pytest.raises(DecodeError, match="media_type"):
            decode_source({"type": "base64", "data": "x"})


# ================================================================== #
# UserLocation
# ================================================================== #


class TestUserLocation:
    def test_approximate(self):
        fixture = {"type": "approximate", "city": "San Francisco", "region": "California", "country": "US"}
        location = decode_user_location(fixture)
        assert isinstance(location, ApproximateLocation)
        assert location.timezone is None
        assert to_wire(location) == fixture

    def test_unknown_location(self):
        fixture = {"type": "precise", "lat": 37.77, "lon": -122.41, "accuracy": None}
        location = decode_user_location(fixture)
        assert isinstance(location, UnknownUserLocation)
        assert location.additional_properties == {"lat": 37.77, "lon": -122.41, "accuracy": None}
        assert json.loads(encode(location)) == fixture
