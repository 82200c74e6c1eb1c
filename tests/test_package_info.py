from __future__ import annotations

from pathlib import Path

import pytest

from adapters.package_info import load_package_info, parse_package_info, write_package_info
from core.domain.models import PackageInfo
from core.errors import PackageInfoError


def test_parse_scalars_and_arrays():
    values = parse_package_info(
        """
        # generated
        appname="Sales/Order Service"
        archive='OrderService.ear'
        config=deployconfig.xml   # trailing comment
        prepare=("select-config.sh" "prepare-deploy.sh")
        complete=()
        """
    )

    assert values["appname"] == "Sales/Order Service"
    assert values["archive"] == "OrderService.ear"
    assert values["config"] == "deployconfig.xml"
    assert values["prepare"] == ["select-config.sh", "prepare-deploy.sh"]
    assert values["complete"] == []


def test_parse_multiline_array_with_parens_in_quotes():
    values = parse_package_info(
        'prepare=(\n  "one (a).sh"\n  "two.sh"  # second\n)\ncomplete=("three.sh") # (done)\n'
    )

    assert values["prepare"] == ["one (a).sh", "two.sh"]
    assert values["complete"] == ["three.sh"]


def test_parse_unterminated_array():
    with pytest.raises(PackageInfoError, match="Unterminated"):
        parse_package_info('prepare=("a.sh"\n')


def test_load_missing_file(tmp_path: Path):
    with pytest.raises(PackageInfoError, match="Failed to load package-info from pkg.zip"):
        load_package_info(tmp_path, label="pkg.zip")


@pytest.mark.parametrize("missing", ["appname", "archive"])
def test_load_requires_appname_and_archive(tmp_path: Path, missing: str):
    lines = {"appname": 'appname="App"', "archive": 'archive="App.ear"'}
    lines.pop(missing)
    (tmp_path / "package-info").write_text("\n".join(lines.values()) + "\n", encoding="utf-8")

    with pytest.raises(PackageInfoError, match=f"{missing}: Not specified by package-info"):
        load_package_info(tmp_path)


def test_load_optional_fields_default_empty(tmp_path: Path):
    (tmp_path / "package-info").write_text('appname="App"\narchive="App.ear"\nconfig=""\n', encoding="utf-8")

    info = load_package_info(tmp_path)

    assert info.config is None
    assert info.prepare == []
    assert info.complete == []


def test_written_file_is_readable_again(tmp_path: Path):
    info = PackageInfo(
        appname='Odd/Name "with" $chars',
        archive="Name.ear",
        config="deployconfig.xml",
        prepare=["select-config.sh", "prepare deploy.sh"],
        complete=["complete-deploy.sh"],
    )

    write_package_info(tmp_path, info)

    assert load_package_info(tmp_path) == info
    assert (tmp_path / "package-info").read_text(encoding="utf-8").startswith("appname=")
