"""Smoke tests: every qt_joins module imports."""


class TestQtJoinsImports:
    """Test that all qt_joins modules import without errors."""

    def test_import_root(self):
        """Test root package import."""
        import qt_joins
        assert hasattr(qt_joins, "__version__")
        assert hasattr(qt_joins, "CatalogValidator")
        assert hasattr(qt_joins, "load_catalog")

    def test_import_fixtures(self):
        from qt_joins.fixtures import FixtureLoader, check_integrity, export_fixture
        assert callable(check_integrity)
        assert callable(export_fixture)
        assert FixtureLoader is not None

    def test_import_execution(self):
        from qt_joins.execution import DualExecutor, DuckDBExecutor
        assert DualExecutor is not None
        assert DuckDBExecutor is not None

    def test_import_validation(self):
        from qt_joins.validation import (
            CatalogValidator,
            EquivalenceChecker,
            QueryNormalizer,
            validate_catalog_file,
        )
        assert callable(validate_catalog_file)
        assert CatalogValidator is not None
        assert EquivalenceChecker is not None
        assert QueryNormalizer is not None

    def test_import_renderers(self):
        from qt_joins.renderers import render_report, report_json
        assert callable(render_report)
        assert callable(report_json)

    def test_import_cli(self):
        from cli.main import cli, main
        assert cli is not None
        assert callable(main)

    def test_error_hierarchy(self):
        from qt_joins.errors import (
            CatalogError,
            FixtureLoadError,
            QtJoinsError,
            QueryBindingError,
            QueryError,
        )
        assert issubclass(CatalogError, QtJoinsError)
        assert issubclass(FixtureLoadError, QtJoinsError)
        assert issubclass(QueryBindingError, QueryError)
