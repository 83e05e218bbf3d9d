"""Tests for CatalogStore loading and symbolic lookups."""

import pytest

from catalog.store import CatalogStore
from common.errors import DuplicateKeyError, MalformedEntryError, UnknownKeyError


def _catalog(**tables):
    return CatalogStore.load(tables)


class TestVersions:
    """Tests for the versions namespace."""

    def test_resolve_plain_version(self):
        """Test resolving a plain string version."""
        store = _catalog(versions={"spring-boot": "3.3.4"})
        assert store.resolve_version("spring-boot") == "3.3.4"

    def test_lookup_is_case_sensitive(self):
        """Test keys differing only in case do not match."""
        store = _catalog(versions={"Spring": "1.0"})
        with pytest.raises(UnknownKeyError) as exc:
            store.resolve_version("spring")
        assert exc.value.namespace == "versions"
        assert exc.value.key == "spring"

    def test_rich_version_prefers_strictly(self):
        """Test strictly wins over require and prefer."""
        store = _catalog(versions={"guava": {"strictly": "[31.0,32.0)", "prefer": "31.1"}})
        assert store.resolve_version("guava") == "[31.0,32.0)"
        entry = store.version_entry("guava")
        assert entry.constraint == (("prefer", "31.1"), ("strictly", "[31.0,32.0)"))

    def test_rich_version_require_over_prefer(self):
        """Test require wins over prefer."""
        store = _catalog(versions={"slf4j": {"require": "2.0", "prefer": "2.0.13", "reject": ["2.0.1"]}})
        assert store.resolve_version("slf4j") == "2.0"

    def test_rich_version_without_selectable_key(self):
        """Test a rich version with only reject is malformed."""
        with pytest.raises(MalformedEntryError):
            _catalog(versions={"bad": {"reject": "1.0"}})

    def test_empty_version_is_malformed(self):
        """Test empty version strings are rejected."""
        with pytest.raises(MalformedEntryError):
            _catalog(versions={"bad": "  "})

    def test_duplicate_version_pairs(self):
        """Test repeated keys in a pair-list table."""
        with pytest.raises(DuplicateKeyError) as exc:
            _catalog(versions=[("kotlin", "2.0.0"), ("kotlin", "2.0.20")])
        assert exc.value.namespace == "versions"
        assert exc.value.key == "kotlin"


class TestLibraries:
    """Tests for the libraries namespace."""

    def test_module_with_version_ref(self):
        """Test a module library pointing at a version key."""
        store = _catalog(
            versions={"lombok": "1.18.34"},
            libraries={"lombok": {"module": "org.projectlombok:lombok", "version": {"ref": "lombok"}}},
        )
        lib = store.resolve_library("lombok")
        assert lib.group == "org.projectlombok"
        assert lib.artifact == "lombok"
        assert lib.version_ref == "lombok"
        assert store.library_version(lib) == "1.18.34"

    def test_group_and_name_form(self):
        """Test the group/name library form."""
        store = _catalog(libraries={"reactor-test": {"group": "io.projectreactor", "name": "reactor-test"}})
        lib = store.resolve_library("reactor-test")
        assert lib.module == "io.projectreactor:reactor-test"
        assert store.library_version(lib) is None

    def test_string_shorthand(self):
        """Test the group:artifact:version library shorthand."""
        store = _catalog(libraries={"junit": "org.junit.jupiter:junit-jupiter:5.10.2"})
        lib = store.resolve_library("junit")
        assert (lib.group, lib.artifact, lib.version) == ("org.junit.jupiter", "junit-jupiter", "5.10.2")

    def test_literal_rich_version(self):
        """Test an inline rich version on a library."""
        store = _catalog(libraries={"guava": {"module": "com.google.guava:guava", "version": {"strictly": "33.0.0-jre"}}})
        assert store.library_version(store.resolve_library("guava")) == "33.0.0-jre"

    def test_dangling_version_ref(self):
        """Test a version.ref to a missing key fails at load."""
        with pytest.raises(UnknownKeyError) as exc:
            _catalog(libraries={"web": {"module": "g:web", "version": {"ref": "missing"}}})
        assert exc.value.namespace == "versions"
        assert exc.value.key == "missing"
        assert "library 'web'" in str(exc.value)

    def test_module_and_group_together_is_malformed(self):
        """Test module and group cannot both be given."""
        with pytest.raises(MalformedEntryError):
            _catalog(libraries={"x": {"module": "g:a", "group": "g"}})

    def test_bad_module_string(self):
        """Test module strings without exactly one colon."""
        with pytest.raises(MalformedEntryError):
            _catalog(libraries={"x": {"module": "no-colon"}})

    def test_ref_mixed_with_rich_keys_is_malformed(self):
        """Test ref cannot be combined with rich version keys."""
        with pytest.raises(MalformedEntryError):
            _catalog(versions={"v": "1"}, libraries={"x": {"module": "g:a", "version": {"ref": "v", "prefer": "2"}}})

    def test_unknown_library(self):
        """Test looking up an undeclared library."""
        store = _catalog()
        with pytest.raises(UnknownKeyError):
            store.resolve_library("nope")


class TestPlugins:
    """Tests for the plugins namespace."""

    def test_plugin_with_version_ref(self):
        """Test a plugin whose version comes from the versions table."""
        store = _catalog(
            versions={"boot": "3.3.4"},
            plugins={"spring-boot": {"id": "org.springframework.boot", "version": {"ref": "boot"}}},
        )
        plugin = store.resolve_plugin("spring-boot")
        assert plugin.plugin_id == "org.springframework.boot"
        assert store.plugin_version(plugin) == "3.3.4"

    def test_plugin_shorthand(self):
        """Test the id:version plugin shorthand."""
        store = _catalog(plugins={"ktlint": "org.jlleitschuh.gradle.ktlint:12.1.1"})
        plugin = store.resolve_plugin("ktlint")
        assert plugin.plugin_id == "org.jlleitschuh.gradle.ktlint"
        assert store.plugin_version(plugin) == "12.1.1"

    def test_plugin_without_version_is_malformed(self):
        """Test plugins must carry a version."""
        with pytest.raises(MalformedEntryError):
            _catalog(plugins={"java": {"id": "java"}})

    def test_reference_chain_resolves_transitively(self):
        """Test library and plugin versions follow their refs."""
        store = _catalog(
            versions={"v1": "1.2.3"},
            plugins={"foo": {"id": "org.example.foo", "version": {"ref": "v1"}}},
        )
        assert store.resolve_version(store.resolve_plugin("foo").version_ref) == store.resolve_version("v1")


class TestBundlesAndTables:
    """Tests for bundles, namespaces and table-level validation."""

    def test_bundle_keeps_member_order(self):
        """Test bundles expand in declared member order."""
        store = _catalog(
            libraries={"b": "g:b:1", "a": "g:a:1"},
            bundles={"both": ["b", "a"]},
        )
        assert [lib.key for lib in store.resolve_bundle("both")] == ["b", "a"]

    def test_bundle_with_unknown_member(self):
        """Test a bundle naming a missing library fails at load."""
        with pytest.raises(UnknownKeyError) as exc:
            _catalog(libraries={"a": "g:a:1"}, bundles={"both": ["a", "zzz"]})
        assert exc.value.namespace == "libraries"
        assert exc.value.key == "zzz"

    def test_namespaces_are_independent(self):
        """Test the same key may appear in different tables."""
        store = _catalog(
            versions={"spring-boot": "3.3.4"},
            libraries={"spring-boot": "org.springframework.boot:spring-boot:3.3.4"},
            plugins={"spring-boot": {"id": "org.springframework.boot", "version": {"ref": "spring-boot"}}},
        )
        assert store.resolve_version("spring-boot") == "3.3.4"
        assert store.resolve_library("spring-boot").artifact == "spring-boot"
        assert store.resolve_plugin("spring-boot").plugin_id == "org.springframework.boot"

    def test_unknown_table_is_malformed(self):
        """Test unexpected top-level tables are rejected."""
        with pytest.raises(MalformedEntryError):
            CatalogStore.load({"versions": {}, "extras": {}})

    def test_metadata_table_is_ignored(self):
        """Test the metadata table is skipped."""
        store = CatalogStore.load({"metadata": {"format.version": "1.1"}, "versions": {"a": "1"}})
        assert store.resolve_version("a") == "1"

    def test_non_mapping_catalog(self):
        """Test a catalog that is not a table is rejected."""
        with pytest.raises(MalformedEntryError):
            CatalogStore.load(["versions"])

    def test_store_tables_are_read_only(self):
        """Test the exposed tables cannot be modified."""
        store = _catalog(versions={"a": "1"})
        with pytest.raises(TypeError):
            store.versions["b"] = "2"  # type: ignore[index]
