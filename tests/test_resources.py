"""
Tests for resource location parsing and reading.
"""

from pathlib import Path

import pytest

from beancontext.config.resources import Resource
from beancontext.exceptions import ResourceError


class TestFileResources:
    def test_bare_relative_path_uses_base(self, tmp_path):
        resource = Resource.from_location("conf/app.properties", base_path=tmp_path)
        assert resource.path == tmp_path / "conf" / "app.properties"
        assert not resource.is_package_resource

    def test_bare_relative_path_without_base(self):
        resource = Resource.from_location("app.properties")
        assert resource.path == Path("app.properties")

    def test_absolute_path_ignores_base(self, tmp_path):
        resource = Resource.from_location("/etc/app.properties", base_path=tmp_path)
        assert resource.path == Path("/etc/app.properties")

    def test_file_prefix(self, tmp_path):
        resource = Resource.from_location("file:app.properties", base_path=tmp_path)
        assert resource.path == tmp_path / "app.properties"

    def test_exists_and_read(self, write_file):
        path = write_file("app.properties", "a=1\n")
        resource = Resource.from_location(str(path))
        assert resource.exists()
        assert resource.read_text() == "a=1\n"
        assert resource.suffix == ".properties"
        assert str(path) in resource.description

    def test_directory_does_not_exist_as_resource(self, tmp_path):
        assert not Resource.from_location(str(tmp_path)).exists()

    def test_missing_file(self, tmp_path):
        resource = Resource.from_location(str(tmp_path / "nope.properties"))
        assert not resource.exists()
        with pytest.raises(ResourceError):
            resource.read_text()

    def test_relative_to_resource(self, tmp_path):
        parent = Resource.from_location(str(tmp_path / "conf" / "beans.yaml"))
        assert parent.relative("app.properties").path == tmp_path / "conf" / "app.properties"

    @pytest.mark.parametrize("location", ["", "   "])
    def test_empty_location(self, location):
        with pytest.raises(ResourceError):
            Resource.from_location(location)


class TestPackageResources:
    def test_classpath_prefix(self):
        resource = Resource.from_location("classpath:beancontext/context.py")
        assert resource.is_package_resource
        assert resource.package == "beancontext"
        assert resource.package_path == "context.py"
        assert resource.exists()
        assert "class ContainerContext" in resource.read_text()

    def test_package_prefix_and_subpackage(self):
        resource = Resource.from_location("package:beancontext.config/settings.py")
        assert resource.exists()
        assert resource.suffix == ".py"

    def test_missing_package_does_not_exist(self):
        resource = Resource.from_location("classpath:no_such_pkg_xyz/app.properties")
        assert not resource.exists()
        with pytest.raises(ResourceError):
            resource.read_text()

    def test_plain_module_is_not_a_package(self):
        resource = Resource.from_location("classpath:json.decoder/x.properties")
        assert not resource.exists()
        with pytest.raises(ResourceError):
            resource.read_text()

    def test_missing_file_in_package(self):
        assert not Resource.from_location("classpath:beancontext/missing.yaml").exists()

    def test_malformed_package_location(self):
        with pytest.raises(ResourceError):
            Resource.from_location("classpath:beancontext")

    def test_relative_to_package_resource(self):
        parent = Resource.from_location("classpath:beancontext/config/settings.py")
        sibling = parent.relative("container.py")
        assert sibling.package == "beancontext"
        assert sibling.package_path == "config/container.py"
        assert sibling.exists()

    def test_absolute_from_package_resource(self, tmp_path):
        parent = Resource.from_location("classpath:beancontext/context.py")
        target = parent.relative(str(tmp_path / "x.properties"))
        assert target.path == tmp_path / "x.properties"
