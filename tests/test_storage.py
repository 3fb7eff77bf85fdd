from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from funnelbuilder.core.models import CaseStudy, CustomizationState, FunnelRecord
from funnelbuilder.core.storage import load_customization, load_funnel, save_customization, save_funnel


def test_customization_file_uses_camel_case_keys(tmp_path: Path) -> None:
    state = CustomizationState(company_name="Acme", theme_id="midnight-glass")
    state.universal_spacers["s"] = {"desktop": 10, "mobile": 5}
    path = tmp_path / "custom.json"
    save_customization(path, state)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["companyName"] == "Acme"
    assert data["universalSpacers"] == {"s": {"desktop": 10, "mobile": 5}}
    assert data["textSizes"]["desktop"]["heading"] == 48

    loaded = load_customization(path)
    assert loaded == state


def test_free_form_keys_survive_a_save(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"fontGroup": "classic", "embedType": "vsl"}), encoding="utf-8")
    state = load_customization(path)
    assert state.font_group == "classic"
    save_customization(path, state)
    assert json.loads(path.read_text(encoding="utf-8"))["embedType"] == "vsl"


def test_load_tolerates_garbled_values(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({
        "themeMode": "sepia",
        "textSizes": {"desktop": {"heading": "52", "subheading": "big"}},
        "universalSpacers": {"a": {"desktop": 1}, "b": {"desktop": 2, "mobile": 3}},
        "logoSize": {"mobile": "40"},
    }), encoding="utf-8")
    state = load_customization(path)
    assert state.theme_mode == "light"
    assert state.text_sizes["desktop"] == {"heading": 52}
    assert state.text_sizes["mobile"]["heading"] == 36
    assert state.universal_spacers == {"b": {"desktop": 2, "mobile": 3}}
    assert state.logo_size == {"desktop": 48, "mobile": 40}


def test_load_rejects_non_objects(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_customization(path)


def test_invalid_json_propagates(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text("{nope", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_customization(path)


def test_funnel_round_trip(tmp_path: Path) -> None:
    record = FunnelRecord(
        id="f1",
        name="Demo",
        vsl_url="https://vimeo.com/1",
        vsl_type="vimeo",
        case_studies=[CaseStudy(name="Acme", media_url="a.png", media_type="image")],
    )
    path = tmp_path / "demo.funnel"
    save_funnel(path, record)
    assert load_funnel(path) == record


def test_case_study_accepts_snake_case_media_keys() -> None:
    study = CaseStudy.from_dict({"name": "A", "media_url": "x.mp4", "media_type": "video"})
    assert study.media_url == "x.mp4"
    assert study.to_dict()["mediaType"] == "video"
