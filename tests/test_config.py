import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.delivery_pricing.config import (
    DEFAULT_SHIPPING_PLANS,
    Settings,
    load_settings,
)
from app.delivery_pricing.pydantic_types import Carrier, PackageSize


def _write(tmp_path, content) -> str:
    path = tmp_path / "settings.json"
    path.write_text(
        content if isinstance(content, str) else json.dumps(content),
        encoding="utf-8",
    )
    return str(path)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.limit == Decimal("10")
        assert settings.n == 3
        assert settings.promotional_carrier is Carrier.LP
        assert settings.shipping_plans == DEFAULT_SHIPPING_PLANS

    @pytest.mark.parametrize(
        "params",
        [
            {"limit": 0},
            {"n": 0},
            {"promotional_carrier": "XY"},
            {"shipping_plans": []},
            {"unknown": 1},
        ],
    )
    def test_invalid_values(self, params):
        with pytest.raises(ValidationError):
            Settings(**params)

    def test_duplicate_shipping_plans(self):
        plan = {"carrier": "LP", "package_size": "S", "price": "1.50"}
        with pytest.raises(ValidationError, match="duplicate shipping plans"):
            Settings(shipping_plans=[plan, plan])


class TestLoadSettings:
    def test_none_gives_defaults(self):
        assert load_settings() == Settings()

    def test_file_overrides_defaults(self, tmp_path):
        path = _write(
            tmp_path,
            '{"limit": 7.5, "shipping_plans": ['
            '{"carrier": "LP", "package_size": "S", "price": 1.1},'
            '{"carrier": "MR", "package_size": "S", "price": 2.2}]}',
        )
        settings = load_settings(path)
        assert settings.limit == Decimal("7.5")
        assert settings.n == 3
        assert [p.price for p in settings.shipping_plans] == [
            Decimal("1.1"),
            Decimal("2.2"),
        ]
        assert settings.shipping_plans[0].package_size is PackageSize.S

    def test_invalid_settings_file(self, tmp_path):
        path = _write(tmp_path, {"n": -1})
        with pytest.raises(ValidationError):
            load_settings(path)

    def test_file_must_hold_object(self, tmp_path):
        path = _write(tmp_path, [1, 2])
        with pytest.raises(TypeError):
            load_settings(path)

    def test_broken_json(self, tmp_path):
        path = _write(tmp_path, "{not json")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_settings(str(tmp_path / "missing.json"))
