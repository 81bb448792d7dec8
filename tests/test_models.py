from nvidiaupdater.models import PackageChange, PackageInventory


def test_inventory_equality_ignores_source_order():
    first = PackageInventory.from_mapping({"b": "2", "a": "1"})
    second = PackageInventory.from_mapping({"a": "1", "b": "2"})

    assert first == second
    assert not first != second
    assert first.names() == ["a", "b"]


def test_inventory_inequality_on_version_addition_or_removal():
    base = PackageInventory.from_mapping({"a": "1"})

    assert base != PackageInventory.from_mapping({"a": "2"})
    assert base != PackageInventory.from_mapping({"a": "1", "b": "1"})
    assert base != PackageInventory.from_mapping({})


def test_empty_inventories_are_equal():
    assert PackageInventory.from_mapping({}) == PackageInventory()


def test_diff_reports_per_package_changes():
    before = PackageInventory.from_mapping({"a": "1", "b": "1", "c": "1"})
    after = PackageInventory.from_mapping({"a": "2", "c": "1", "d": "1"})

    changes = before.diff(after)

    assert changes == [
        PackageChange("a", "1", "2"),
        PackageChange("b", "1", None),
        PackageChange("d", None, "1"),
    ]
    assert [change.kind for change in changes] == ["changed", "removed", "added"]
    assert changes[0].describe() == "a: 1 -> 2"
