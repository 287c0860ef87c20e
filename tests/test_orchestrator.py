"""Integration tests for AnalysisOrchestrator on the sample Rails tree."""

import pytest

from paramscope.config_runtime import load_runtime_config
from paramscope.indexer.orchestrator import AnalysisOrchestrator
from paramscope.routes import parse_route_line


@pytest.fixture
def analyzed(default_test_case):
    orchestrator = AnalysisOrchestrator(default_test_case)
    return orchestrator, orchestrator.analyze()


def reports_by_endpoint(reports):
    return {(r.request.method.value, r.request.endpoint): r for r in reports}


class TestBuildPhase:

    def test_model_counts(self, analyzed):
        _, result = analyzed
        assert result.errors == []
        assert result.files_analyzed == 9
        assert result.registry.get_stats() == {"controllers": 3, "concerns": 2, "helpers": 1}

    def test_declarations(self, analyzed):
        _, result = analyzed
        registry = result.registry
        assert set(registry.controllers) == {"ApplicationController", "PagesController", "AdminUsersController"}
        assert set(registry.concerns) == {"ErrorHandling", "HttpResponses"}
        assert set(registry.helpers) == {"PagesHelper"}
        assert registry.get_controller("AdminUsersController").includes == ["ErrorHandling"]

    def test_views(self, analyzed):
        _, result = analyzed
        assert set(result.views) == {("pages", "index"), ("admin/users", "show")}
        assert result.views[("admin/users", "show")].fields == ["id", "name", "email", "tags"]
        assert set(result.views[("pages", "index")].fields) == {
            "pages.id", "pages.title", "pages.?author", "page_index",
        }

    def test_single_worker_gives_same_model(self, default_test_case):
        config = load_runtime_config(str(default_test_case))
        config["limits"]["workers"] = 1
        result = AnalysisOrchestrator(default_test_case, config).analyze()
        assert result.registry.get_stats() == {"controllers": 3, "concerns": 2, "helpers": 1}


class TestResolvePhase:

    def test_endpoint_params(self, analyzed):
        orchestrator, result = analyzed
        reports = reports_by_endpoint(orchestrator.resolve(orchestrator.load_requests(), result))

        assert reports[("GET", "pages#index")].params == ["auth_token", "index", "user_id"]
        assert reports[("GET", "admin/users#show")].params == ["auth_token", "id"]
        for verb in ("PATCH", "PUT"):
            assert reports[(verb, "admin/users#update")].params == [
                "auth_token", "email", "id", "name", "tags[]", "user",
            ]
        assert all(report.ok for report in reports.values())

    def test_view_fields_attached(self, analyzed):
        orchestrator, result = analyzed
        reports = reports_by_endpoint(orchestrator.resolve(orchestrator.load_requests(), result))
        assert reports[("GET", "admin/users#show")].fields == ["id", "name", "email", "tags"]
        assert reports[("PATCH", "admin/users#update")].fields == []

    def test_unresolved_endpoint_is_reported_not_raised(self, analyzed):
        orchestrator, result = analyzed
        requests = parse_route_line("GET /ghosts(.:format) ghosts#index")
        (report,) = orchestrator.resolve(requests, result)
        assert not report.ok
        assert "GhostsController" in report.error
        assert report.to_dict()["error"] == report.error


class TestFailures:

    def test_broken_file_does_not_abort(self, sample_project):
        (sample_project / "app/controllers/broken_controller.rb").write_text("class Broken\nend\n")
        result = AnalysisOrchestrator(sample_project).analyze()

        assert [e.path for e in result.errors] == ["app/controllers/broken_controller.rb"]
        assert "single file classes not supported" in result.errors[0].message
        assert result.registry.get_stats()["controllers"] == 3

    def test_oversized_files_fail_individually(self, default_test_case):
        config = load_runtime_config(str(default_test_case))
        config["limits"]["max_file_size"] = 10
        result = AnalysisOrchestrator(default_test_case, config).analyze()

        assert result.failed_files == result.files_analyzed == 9
        assert len(result.registry) == 0

    def test_later_file_replaces_earlier_declaration(self, sample_project):
        (sample_project / "app/controllers/zz_pages_controller.rb").write_text(
            "class PagesController < ApplicationController\n"
            "  def index\n"
            "    params[:override]\n"
            "  end\n"
            "end\n"
        )
        result = AnalysisOrchestrator(sample_project).analyze()
        pages = result.registry.get_controller("PagesController")
        assert [m.name for m in pages.methods] == ["index"]
        assert pages.methods[0].params == {"override"}

    def test_missing_directories_yield_no_files(self, tmp_path):
        result = AnalysisOrchestrator(tmp_path).analyze()
        assert result.files_analyzed == 0
        assert len(result.registry) == 0
