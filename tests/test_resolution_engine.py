"""Tests for the resolution engine (full resolution passes)."""

import json
import logging

import pytest

from catalog.store import CatalogStore
from common.errors import (
    DuplicateKeyError,
    MalformedEntryError,
    MultipleConventionError,
    ResolutionError,
    UnknownKeyError,
)
from conventions.definitions import ConventionDefinition, UnitDefinition
from conventions.engine import ResolutionEngine, resolve
from conventions.models import DependencyDecl, PluginDecl

CATALOG = {
    "versions": {"boot": "3.3.4", "dm": "1.1.6", "lombok": "1.18.34", "old-boot": "3.1.0"},
    "libraries": {
        "starter-web": {"module": "org.springframework.boot:spring-boot-starter-web"},
        "starter-webflux": {"module": "org.springframework.boot:spring-boot-starter-webflux"},
        "starter-test": {"module": "org.springframework.boot:spring-boot-starter-test", "version": {"ref": "boot"}},
        "starter-test-old": {"module": "org.springframework.boot:spring-boot-starter-test", "version": {"ref": "old-boot"}},
        "lombok": {"module": "org.projectlombok:lombok", "version": {"ref": "lombok"}},
    },
    "plugins": {
        "spring-boot": {"id": "org.springframework.boot", "version": {"ref": "boot"}},
        "dependency-management": {"id": "io.spring.dependency-management", "version": {"ref": "dm"}},
    },
}

CONVENTIONS = {
    "spring-conventions": {
        "plugins": [{"id": "java"}, "spring-boot", "dependency-management"],
        "dependencies": [
            {"scope": "annotationProcessor", "library": "lombok"},
            {"scope": "testImplementation", "library": "starter-test"},
        ],
    }
}

UNITS = {
    "spring-web-demo": {
        "convention": "spring-conventions",
        "dependencies": [{"scope": "implementation", "library": "starter-web"}],
    },
    "spring-reactive-demo": {
        "convention": "spring-conventions",
        "dependencies": [{"scope": "implementation", "library": "starter-webflux"}],
    },
}


def _dump(result):
    return json.dumps({name: cfg.to_dict() for name, cfg in result.items()}, indent=4)


class TestResolve:
    """Tests for successful resolution passes."""

    def test_units_in_declaration_order(self):
        """Test results follow unit declaration order."""
        result = ResolutionEngine().resolve(CATALOG, CONVENTIONS, UNITS)
        assert list(result) == ["spring-web-demo", "spring-reactive-demo"]

    def test_effective_configuration(self):
        """Test the full effective configuration of one unit."""
        cfg = ResolutionEngine().resolve(CATALOG, CONVENTIONS, UNITS)["spring-web-demo"]
        assert cfg.to_dict() == {
            "convention": "spring-conventions",
            "plugins": ["java", "org.springframework.boot", "io.spring.dependency-management"],
            "pluginMarkers": [
                {"group": "org.springframework.boot", "artifact": "org.springframework.boot", "version": "3.3.4"},
                {"group": "io.spring.dependency-management", "artifact": "io.spring.dependency-management", "version": "1.1.6"},
            ],
            "dependencies": [
                {"scope": "annotationProcessor", "group": "org.projectlombok", "artifact": "lombok", "version": "1.18.34"},
                {"scope": "testImplementation", "group": "org.springframework.boot", "artifact": "spring-boot-starter-test", "version": "3.3.4"},
                {"scope": "implementation", "group": "org.springframework.boot", "artifact": "spring-boot-starter-web", "version": None},
            ],
        }

    def test_identical_output_for_identical_input(self):
        """Test repeated passes serialize identically."""
        first = _dump(ResolutionEngine().resolve(CATALOG, CONVENTIONS, UNITS))
        second = _dump(ResolutionEngine().resolve(CATALOG, CONVENTIONS, UNITS))
        assert first == second

    def test_convention_entries_shared_verbatim(self):
        """Test units get identical convention entries."""
        result = resolve(CATALOG, CONVENTIONS, UNITS)
        web = result["spring-web-demo"]
        reactive = result["spring-reactive-demo"]
        assert web.dependencies[:2] == reactive.dependencies[:2]
        assert web.plugins == reactive.plugins
        assert [d.artifact for d in web.dependencies[2:]] == ["spring-boot-starter-web"]
        assert [d.artifact for d in reactive.dependencies[2:]] == ["spring-boot-starter-webflux"]

    def test_unit_scope_overrides_convention_scope(self):
        """Test a unit redeclaration replaces the convention entry."""
        units = {
            "web": {
                "convention": "spring-conventions",
                "dependencies": [{"scope": "implementation", "library": "starter-test"}],
            }
        }
        cfg = resolve(CATALOG, CONVENTIONS, units)["web"]
        matches = [d for d in cfg.dependencies if d.artifact == "spring-boot-starter-test"]
        assert len(matches) == 1
        assert matches[0].scope == "implementation"
        assert matches[0].origin == "unit:web"
        assert cfg.dependencies[-1] is matches[0]

    def test_override_downgrade_is_logged(self, caplog):
        """Test overrides and downgrades are logged."""
        caplog.set_level(logging.INFO)
        units = {
            "web": {
                "convention": "spring-conventions",
                "dependencies": [{"scope": "testImplementation", "library": "starter-test-old"}],
            }
        }
        cfg = resolve(CATALOG, CONVENTIONS, units)["web"]
        test_deps = [d for d in cfg.dependencies if d.artifact == "spring-boot-starter-test"]
        assert [d.version for d in test_deps] == ["3.1.0"]
        messages = [r.getMessage() for r in caplog.records]
        assert any("overridden by unit:web" in m for m in messages)
        assert any("downgraded from 3.3.4 to 3.1.0" in m for m in messages)

    def test_duplicate_plugins_collapse_to_first(self):
        """Test a repeated plugin keeps its first position."""
        units = {"web": {"convention": "spring-conventions", "plugins": ["spring-boot", {"id": "application"}]}}
        cfg = resolve(CATALOG, CONVENTIONS, units)["web"]
        assert cfg.plugin_ids == ["java", "org.springframework.boot", "io.spring.dependency-management", "application"]

    def test_repeated_plugin_with_other_version_is_logged(self, caplog):
        """Test a repeated plugin with another version logs a warning."""
        caplog.set_level(logging.INFO)
        catalog = dict(CATALOG)
        catalog["plugins"] = dict(
            CATALOG["plugins"],
            **{"spring-boot-old": {"id": "org.springframework.boot", "version": {"ref": "old-boot"}}},
        )
        units = {"web": {"convention": "spring-conventions", "plugins": ["spring-boot-old"]}}
        cfg = resolve(catalog, CONVENTIONS, units)["web"]
        assert [m.notation() for m in cfg.markers][0] == "org.springframework.boot:org.springframework.boot:3.3.4"
        info = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("plugin org.springframework.boot (spring-boot-old) already applied as spring-boot" in m for m in info)
        assert warnings == [
            "Unit 'web': plugin org.springframework.boot kept at version 3.3.4, repeat with version 3.1.0 ignored"
        ]

    def test_repeated_plugin_with_same_version_only_informs(self, caplog):
        """Test a repeated plugin with the same version is only noted."""
        caplog.set_level(logging.INFO)
        units = {"web": {"convention": "spring-conventions", "plugins": ["spring-boot"]}}
        resolve(CATALOG, CONVENTIONS, units)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
        assert any("already applied as spring-boot" in r.getMessage() for r in caplog.records)

    def test_unit_without_convention(self):
        """Test units without a convention resolve their own entries."""
        units = {"lib": {"dependencies": [{"scope": "api", "coordinate": "org.example:util:2.0"}]}, "empty": None}
        result = resolve(CATALOG, CONVENTIONS, units)
        assert result["lib"].convention is None
        assert result["lib"].plugins == ()
        assert [d.to_dict() for d in result["lib"].dependencies] == [
            {"scope": "api", "group": "org.example", "artifact": "util", "version": "2.0"}
        ]
        assert result["empty"].dependencies == ()

    def test_accepts_loaded_catalog_and_definition_objects(self):
        """Test passing a CatalogStore and definition objects."""
        catalog = CatalogStore.load(CATALOG)
        conventions = [
            ConventionDefinition(
                name="base",
                plugins=(PluginDecl("spring-boot"),),
                dependencies=(DependencyDecl("annotationProcessor", "lombok"),),
            )
        ]
        units = [UnitDefinition(name="app", conventions=("base",))]
        result = ResolutionEngine().resolve(catalog, conventions, units)
        assert result["app"].plugin_ids == ["org.springframework.boot"]

    def test_marker_suffix(self):
        """Test the engine applies the marker suffix."""
        result = ResolutionEngine(marker_suffix=".gradle.plugin").resolve(CATALOG, CONVENTIONS, UNITS)
        marker = result["spring-web-demo"].markers[0]
        assert marker.notation() == "org.springframework.boot:org.springframework.boot.gradle.plugin:3.3.4"


class TestResolveFailures:
    """Tests for all-or-nothing failure semantics."""

    def test_unknown_library_in_unit(self):
        """Test an unknown library names the failing unit."""
        units = dict(UNITS)
        units["broken"] = {"convention": "spring-conventions", "dependencies": [{"scope": "implementation", "library": "nope"}]}
        with pytest.raises(ResolutionError) as exc:
            resolve(CATALOG, CONVENTIONS, units)
        assert isinstance(exc.value.cause, UnknownKeyError)
        assert exc.value.cause.key == "nope"
        assert exc.value.unit == "broken"

    def test_unknown_plugin_in_convention(self):
        """Test an unknown plugin names the failing convention."""
        conventions = {"bad": {"plugins": ["kotlin-jvm"]}}
        with pytest.raises(ResolutionError) as exc:
            resolve(CATALOG, conventions, {"web": {"convention": "bad"}})
        assert exc.value.convention == "bad"
        assert isinstance(exc.value.cause, UnknownKeyError)
        assert "kotlin-jvm" in str(exc.value)

    def test_two_conventions_on_one_unit(self):
        """Test a unit listing two conventions fails."""
        conventions = dict(CONVENTIONS)
        conventions["other"] = {"plugins": []}
        units = {"web": {"convention": ["spring-conventions", "other"]}}
        with pytest.raises(ResolutionError) as exc:
            resolve(CATALOG, conventions, units)
        assert isinstance(exc.value.cause, MultipleConventionError)
        assert exc.value.unit == "web"

    def test_undefined_convention(self):
        """Test a unit naming an undefined convention fails."""
        with pytest.raises(ResolutionError) as exc:
            resolve(CATALOG, CONVENTIONS, {"web": {"convention": "missing"}})
        assert isinstance(exc.value.cause, UnknownKeyError)
        assert exc.value.cause.namespace == "conventions"

    def test_duplicate_catalog_key_aborts_before_units(self):
        """Test catalog errors abort before any unit."""
        catalog = dict(CATALOG)
        catalog["versions"] = [("boot", "3.3.4"), ("boot", "3.3.5")]
        with pytest.raises(ResolutionError) as exc:
            resolve(catalog, CONVENTIONS, UNITS)
        assert isinstance(exc.value.cause, DuplicateKeyError)
        assert exc.value.unit is None
        assert exc.value.convention is None

    def test_malformed_definition(self):
        """Test an invalid unit definition fails the pass."""
        units = {"web": {"dependencies": [{"scope": "implementation"}]}}
        with pytest.raises(ResolutionError) as exc:
            resolve(CATALOG, CONVENTIONS, units)
        assert isinstance(exc.value.cause, MalformedEntryError)

    def test_duplicate_unit_definitions(self):
        """Test two units with the same name fail the pass."""
        units = [UnitDefinition(name="app"), UnitDefinition(name="app")]
        with pytest.raises(ResolutionError) as exc:
            resolve(CATALOG, CONVENTIONS, units)
        assert isinstance(exc.value.cause, DuplicateKeyError)

    def test_engine_is_reusable_after_failure(self):
        """Test a failed pass leaves the engine usable."""
        engine = ResolutionEngine()
        with pytest.raises(ResolutionError):
            engine.resolve(CATALOG, CONVENTIONS, {"web": {"convention": "missing"}})
        assert list(engine.resolve(CATALOG, CONVENTIONS, UNITS)) == ["spring-web-demo", "spring-reactive-demo"]
