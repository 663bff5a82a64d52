from __future__ import annotations

from tv_wifi_remote import (
    BrandRegistry,
    TvRemoteConfig,
    SamsungHandler,
    RokuHandler,
    GenericHandler,
  )

from fakes import FakeProbe, FakeHttpClient

def test_samsung_resolves_to_native_handler():
    registry = BrandRegistry()
    handler = registry.resolve("Samsung")
    assert isinstance(handler, SamsungHandler)
    assert handler.protocol_name == "Samsung Smart TV"
    assert handler.default_port == 8001
    assert registry.supports_natively("Samsung")

def test_brand_names_are_case_and_space_insensitive():
    registry = BrandRegistry()
    assert isinstance(registry.resolve("  SAMSUNG "), SamsungHandler)
    assert registry.protocol_name_for("lg") == registry.protocol_name_for("LG")

def test_tcl_speaks_roku():
    registry = BrandRegistry()
    assert isinstance(registry.resolve("TCL"), RokuHandler)
    assert registry.protocol_name_for("TCL") == registry.protocol_name_for("Roku")
    assert registry.default_port_for("TCL") == 8060

def test_unknown_and_android_brands_fall_back_to_generic():
    registry = BrandRegistry()
    for brand in (
            "Acme", "", "Xiaomi", "Hisense", "Sharp", "Toshiba", "Haier",
            "Skyworth", "Vu", "Realme", "OnePlus", "Nokia",
          ):
        assert isinstance(registry.resolve(brand), GenericHandler)
        assert not registry.supports_natively(brand)
    assert registry.protocol_name_for("Acme") == "Generic UPnP"

def test_resolve_returns_fresh_handlers_sharing_dependencies():
    config = TvRemoteConfig(http_timeout=2.0)
    probe = FakeProbe(config=config)
    http = FakeHttpClient()
    registry = BrandRegistry(probe=probe, http=http)
    first = registry.resolve("Roku")
    second = registry.resolve("Roku")
    assert first is not second
    assert first.probe is probe and first.http is http
    assert first.config is config

def test_native_brands():
    assert BrandRegistry().native_brands == [
        'lg', 'panasonic', 'philips', 'roku', 'samsung', 'sony', 'tcl', 'vizio',
    ]

def test_custom_handler_table():
    registry = BrandRegistry(handler_classes={'Roku': RokuHandler}, fallback_class=SamsungHandler)
    assert registry.native_brands == ['roku']
    assert isinstance(registry.resolve("LG"), SamsungHandler)
