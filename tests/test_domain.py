import pytest

from gearrank.domain import (
    UnknownDomainError,
    get_all_domains,
    get_domain_config,
)


def test_known_domains():
    assert set(get_all_domains()) == {"desktour", "camera"}


def test_desktour_config():
    cfg = get_domain_config("desktour")
    assert cfg.price_range_order[0] == "under_5000"
    assert cfg.price_range_order[-1] == "over_50000"
    assert not (cfg.has_subcategory or cfg.has_lens_tags or cfg.has_body_tags)
    assert cfg.base_path == "/desktour"
    assert "マウス" in cfg.get_compatible_categories("キーボード")


def test_camera_config():
    cfg = get_domain_config("camera")
    assert len(cfg.price_range_order) == 7
    assert cfg.price_range_order[-1] == "over_300000"
    assert cfg.has_subcategory and cfg.has_lens_tags and cfg.has_body_tags
    assert cfg.get_compatible_categories("レンズ")[0] == "カメラ"


def test_unknown_category_has_no_pairings():
    assert get_domain_config("camera").get_compatible_categories("unknown") == []


def test_unknown_domain_raises_value_error():
    with pytest.raises(UnknownDomainError):
        get_domain_config("furniture")
    with pytest.raises(ValueError):
        get_domain_config("")


def test_config_is_read_only():
    cfg = get_domain_config("desktour")
    with pytest.raises(Exception):
        cfg.id = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        cfg.compatible_categories["new"] = ()  # type: ignore[index]
