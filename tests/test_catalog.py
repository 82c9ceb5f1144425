"""Asset catalog and project health tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from declutter.catalog import (
    CatalogError,
    DuplicateNameError,
    HostOperationError,
    MissingProjectError,
    ProjectCatalog,
    existing_asset_ids,
)
from declutter.catalog.health import (
    average_folder_depth,
    duplicate_risk,
    folder_depth,
    naming_consistency,
    project_health,
)
from declutter.catalog.models import Asset, Folder, ProjectSnapshot


def _catalog() -> ProjectCatalog:
    return ProjectCatalog(
        ProjectSnapshot(
            name="Doc",
            assets=[
                Asset(id="asset_1", name="a.mov", type="footage"),
                Asset(id="asset_2", name="b.wav", type="audio", folder="folder_3"),
            ],
            folders=[Folder(id="folder_3", name="Audio")],
        )
    )


def test_snapshot_loads_host_payload(tmp_path: Path) -> None:
    path = tmp_path / "project.json"
    path.write_text(
        json.dumps(
            {
                "name": "Host",
                "assets": [
                    {
                        "id": "asset_1",
                        "name": "Solid 1",
                        "type": "solid",
                        "size": None,
                        "tags": ["x", "x"],
                        "frameRate": 24,
                        "folder": None,
                    }
                ],
                "folders": [{"id": "folder_1", "name": "Comps", "parent": None}],
            }
        ),
        encoding="utf-8",
    )

    catalog = ProjectCatalog.from_file(path)

    asset = catalog.get_asset("asset_1")
    assert asset is not None
    assert asset.type == "other"
    assert asset.size == 0
    assert asset.tags == ["x"]
    assert catalog.name == "Host"


def test_from_file_errors(tmp_path: Path) -> None:
    with pytest.raises(MissingProjectError):
        ProjectCatalog.from_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(CatalogError):
        ProjectCatalog.from_file(broken)

    failed = tmp_path / "failed.json"
    failed.write_text(json.dumps({"error": "No project open"}), encoding="utf-8")
    with pytest.raises(CatalogError, match="No project open"):
        ProjectCatalog.from_file(failed)


def test_save_round_trips_aliases(tmp_path: Path) -> None:
    catalog = _catalog()
    path = tmp_path / "out" / "project.json"

    catalog.save(path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["assets"][1]["folder"] == "folder_3"
    assert ProjectCatalog.from_file(path).get_folder("folder_3") is not None


def test_create_folder_assigns_sequential_ids() -> None:
    catalog = _catalog()

    first = catalog.create_folder("Footage", "blue")
    nested = catalog.create_folder("Selects", parent_id=first.id)

    assert first.id == "folder_4"
    assert nested.id == "folder_5"
    assert nested.parent_id == first.id
    assert first.created_at is not None


def test_create_folder_rejects_invalid_requests() -> None:
    catalog = _catalog()

    with pytest.raises(DuplicateNameError):
        catalog.create_folder("audio")
    with pytest.raises(HostOperationError):
        catalog.create_folder("   ")
    with pytest.raises(HostOperationError):
        catalog.create_folder("Child", parent_id="folder_99")

    nested = catalog.create_folder("Audio", parent_id="folder_3")
    assert nested.parent_id == "folder_3"


def test_move_assets_skips_unknown_ids() -> None:
    catalog = _catalog()
    folder = catalog.create_folder("Footage")

    assert catalog.move_assets([], "folder_99") is True
    assert catalog.move_assets(["asset_1", "asset_404"], folder.id) is True
    assert catalog.get_asset("asset_1").folder_id == folder.id  # type: ignore[union-attr]
    with pytest.raises(HostOperationError):
        catalog.move_assets(["asset_1"], "folder_99")


def test_returned_models_are_copies() -> None:
    catalog = _catalog()

    catalog.list_assets()[0].folder_id = "folder_3"

    assert catalog.get_asset("asset_1").folder_id is None  # type: ignore[union-attr]
    assert [asset.id for asset in catalog.unorganized_assets()] == ["asset_1"]
    assert [asset.id for asset in catalog.assets_by_type("audio")] == ["asset_2"]


def test_single_folder_operations() -> None:
    catalog = _catalog()
    parent = catalog.create_folder("Footage")
    child = catalog.create_folder("Selects", parent_id="folder_3")
    catalog.move_assets(["asset_1"], child.id)

    assert catalog.rename_folder(parent.id, "Video")
    with pytest.raises(DuplicateNameError):
        catalog.rename_folder(parent.id, "AUDIO")
    assert catalog.set_folder_color(parent.id, "red")
    assert catalog.get_folder(parent.id).color == "red"  # type: ignore[union-attr]

    assert catalog.delete_folder("folder_3")
    assert catalog.get_folder(child.id).parent_id is None  # type: ignore[union-attr]
    assert catalog.get_asset("asset_2").folder_id is None  # type: ignore[union-attr]

    assert catalog.delete_folder(child.id, move_assets_to_parent=False)
    assert catalog.get_asset("asset_1") is None
    with pytest.raises(HostOperationError):
        catalog.delete_folder(child.id)


def test_existing_asset_ids_filters_and_dedupes() -> None:
    catalog = _catalog()

    assert existing_asset_ids(catalog, ["asset_2", "gone", "asset_2", "asset_1"]) == [
        "asset_2",
        "asset_1",
    ]


def test_folder_depth_handles_dangling_and_cyclic_chains() -> None:
    folders = [
        Folder(id="root", name="Root"),
        Folder(id="child", name="Child", parent="root"),
        Folder(id="grandchild", name="Grandchild", parent="child"),
        Folder(id="orphan", name="Orphan", parent="deleted"),
        Folder(id="loop_a", name="Loop A", parent="loop_b"),
        Folder(id="loop_b", name="Loop B", parent="loop_a"),
        Folder(id="self", name="Self", parent="self"),
    ]
    by_id = {folder.id: folder for folder in folders}

    assert folder_depth(by_id["root"], by_id) == 1
    assert folder_depth(by_id["grandchild"], by_id) == 3
    assert folder_depth(by_id["orphan"], by_id) == 1
    assert folder_depth(by_id["loop_a"], by_id) == 1
    assert folder_depth(by_id["self"], by_id) == 1
    assert average_folder_depth(folders) == pytest.approx(10 / 7)
    assert average_folder_depth([]) == 0.0


def test_duplicate_risk_counts_stems_and_sizes() -> None:
    assets = [
        Asset(id="asset_1", name="shot_01.mov", size=10),
        Asset(id="asset_2", name="shot_02.mov", size=20),
        Asset(id="asset_3", name="city.mov", size=20),
        Asset(id="asset_4", name="sky.mov", size=30),
    ]

    # one repeated stem ("shot.mov") and one repeated size (20)
    assert duplicate_risk(assets) == pytest.approx(50.0)
    assert duplicate_risk([]) == 0.0


def test_project_health_scores_organization() -> None:
    catalog = _catalog()

    health = project_health(catalog.list_assets(), catalog.list_folders())

    assert health.total_assets == 2
    assert health.total_folders == 1
    assert health.unorganized_assets == 1
    assert health.organization_rate == pytest.approx(50.0)
    assert health.average_folder_depth == pytest.approx(1.0)
    assert health.naming_consistency == 100
    assert health.duplicate_risk == pytest.approx(50.0)
    # 50 * 0.4 + 100 * 0.3 + 50 * 0.2 + 20 * 0.1
    assert health.overall_score == 62
    assert health.model_dump(by_alias=True)["overallScore"] == 62


def test_empty_project_is_fully_organized() -> None:
    health = project_health([], [])

    assert health.organization_rate == pytest.approx(100.0)
    assert health.overall_score == 90


def test_health_naming_consistency_penalizes_mixed_traits() -> None:
    uniform = [Asset(id=f"asset_{index}", name=f"shot_0{index}.mov") for index in range(1, 4)]
    mixed = [
        Asset(id="asset_1", name="Interview_01.mov"),
        Asset(id="asset_2", name="BRoll_Skyline.mov"),
        Asset(id="asset_3", name="Music_Bed.wav"),
    ]
    chaotic = [
        Asset(id="asset_1", name="Shot 01.mov"),
        Asset(id="asset_2", name="shot-b.mov"),
        Asset(id="asset_3", name="shot_c.mov"),
    ]

    assert naming_consistency([]) == 100
    assert naming_consistency(uniform) == 100
    # digits appear in one name of three
    assert naming_consistency(mixed) == 85
    # digits, underscores, hyphens, spaces, upper and lower case are all mixed
    assert naming_consistency(chaotic) == 10
    assert project_health(mixed, []).naming_consistency == 85
