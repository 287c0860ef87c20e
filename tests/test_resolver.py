"""Tests for MethodResolver.

Declarations are built directly so each test controls the exact model the
resolver sees.
"""

import pytest

from paramscope.graph.registry import ModelRegistry
from paramscope.graph.resolver import MethodResolver
from paramscope.graph.types import (
    ActionHook,
    ActionKind,
    Concern,
    Controller,
    HelperModule,
    MethodProfile,
)
from paramscope.indexer.exceptions import CyclicInheritanceError, ResolutionError
from paramscope.utils.logging import logger


def method(name, params=(), calls=(), args=()):
    return MethodProfile(
        name=name,
        args=list(args),
        params=set(params),
        method_calls=[(callee, ()) for callee in calls],
    )


def before(target):
    return ActionHook(ActionKind.BEFORE_ACTION, target, "before_action")


def build(*declarations):
    registry = ModelRegistry()
    for decl in declarations:
        registry.add(decl)
    return registry


@pytest.fixture
def warnings_log():
    """Collect loguru warning messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


class TestMethodSets:

    def test_all_methods_order(self):
        base = Controller(name="ApplicationController", parent_name="ActionController::Base",
                          methods=[method("auth")])
        users = Controller(name="UsersController", parent_name="ApplicationController",
                           methods=[method("index")], includes=["Paging"])
        paging = Concern(name="Paging", methods=[method("page")])
        registry = build(base, users, paging)

        resolver = MethodResolver(registry, users)
        assert [m.name for m in resolver.all_methods()] == ["index", "auth", "page"]

    def test_inherited_methods_include_ancestor_mixins(self):
        base = Controller(name="ApplicationController", parent_name="ActionController::API",
                          includes=["HttpResponses"])
        pages = Controller(name="PagesController", parent_name="ApplicationController")
        responses = Concern(name="HttpResponses", methods=[method("json_ok")])
        registry = build(base, pages, responses)

        assert [m.name for m in MethodResolver(registry, pages).inherited_methods()] == ["json_ok"]

    def test_duplicates_are_kept_and_own_method_wins(self):
        base = Controller(name="ApplicationController", parent_name="X",
                          methods=[method("index", params=["base"])])
        pages = Controller(name="PagesController", parent_name="ApplicationController",
                           methods=[method("index", params=["own"])])
        registry = build(base, pages)

        resolver = MethodResolver(registry, pages)
        assert [m.name for m in resolver.all_methods()] == ["index", "index"]
        assert resolver.method_by_name("index").params == {"own"}

    def test_unknown_parent_has_no_methods(self):
        pages = Controller(name="PagesController", parent_name="ActionController::Base")
        resolver = MethodResolver(build(pages), pages)
        assert resolver.parent() is None
        assert resolver.inherited_methods() == []


class TestNameLookup:

    def test_parent_prefers_enclosing_module(self):
        admin_base = Controller(name="BaseController", parent_name="X", enclosing_module="Admin")
        base = Controller(name="BaseController", parent_name="X")
        users = Controller(name="UsersController", parent_name="BaseController", enclosing_module="Admin")
        registry = build(admin_base, base, users)

        assert MethodResolver(registry, users).parent() is admin_base

    def test_parent_falls_back_to_top_level(self):
        base = Controller(name="ApplicationController", parent_name="X")
        users = Controller(name="UsersController", parent_name="ApplicationController", enclosing_module="Admin")
        registry = build(base, users)

        assert MethodResolver(registry, users).parent() is base

    def test_scoped_parent_name(self):
        admin_base = Controller(name="BaseController", parent_name="X", enclosing_module="Admin")
        users = Controller(name="UsersController", parent_name="Admin::BaseController")
        registry = build(admin_base, users)

        assert MethodResolver(registry, users).parent() is admin_base

    def test_parent_tries_each_enclosing_module(self):
        a_base = Controller(name="Base", parent_name="X", enclosing_module="A")
        base = Controller(name="Base", parent_name="X")
        c = Controller(name="C", parent_name="Base", enclosing_module="AB", nesting=("A", "AB"))
        registry = build(a_base, base, c)

        assert MethodResolver(registry, c).parent() is a_base

    def test_innermost_module_wins(self):
        a_base = Controller(name="Base", parent_name="X", enclosing_module="A")
        ab_base = Controller(name="Base", parent_name="X", enclosing_module="AB")
        c = Controller(name="C", parent_name="Base", enclosing_module="AB", nesting=("A", "AB"))
        registry = build(a_base, ab_base, c)

        assert MethodResolver(registry, c).parent() is ab_base

    def test_root_anchored_parent_skips_enclosing_module(self):
        admin_base = Controller(name="BaseController", parent_name="X", enclosing_module="Admin")
        base = Controller(name="BaseController", parent_name="X")
        users = Controller(name="UsersController", parent_name="::BaseController", enclosing_module="Admin")
        registry = build(admin_base, base, users)

        assert MethodResolver(registry, users).parent() is base

    def test_concern_takes_precedence_over_helper(self):
        concern = Concern(name="Auth", methods=[method("from_concern")])
        helper = HelperModule(name="Auth", methods=[method("from_helper")])
        users = Controller(name="UsersController", parent_name="X", includes=["Auth"])
        registry = build(concern, helper, users)

        assert MethodResolver(registry, users).included_modules() == [concern]

    def test_helper_include(self):
        helper = HelperModule(name="PagesHelper", methods=[method("page_title", params=["title"])])
        pages = Controller(name="PagesController", parent_name="X", includes=["PagesHelper"])
        registry = build(helper, pages)

        assert [m.name for m in MethodResolver(registry, pages).included_methods()] == ["page_title"]

    def test_missing_include_warns_and_is_skipped(self, warnings_log):
        users = Controller(name="UsersController", parent_name="X", includes=["Missing"])
        resolver = MethodResolver(build(users), users)

        assert resolver.included_modules() == []
        assert any("Missing" in message for message in warnings_log)


class TestCycles:

    def test_two_controller_cycle(self):
        a = Controller(name="AController", parent_name="BController")
        b = Controller(name="BController", parent_name="AController")
        registry = build(a, b)

        with pytest.raises(CyclicInheritanceError) as exc_info:
            MethodResolver(registry, a).all_methods()
        assert exc_info.value.chain == ["AController", "BController", "AController"]

    def test_three_controller_cycle(self):
        a = Controller(name="AController", parent_name="BController")
        b = Controller(name="BController", parent_name="CController")
        c = Controller(name="CController", parent_name="AController")
        with pytest.raises(CyclicInheritanceError):
            MethodResolver(build(a, b, c), a).action_hooks()

    def test_class_never_names_itself_as_parent(self):
        a = Controller(name="AController", parent_name="AController")
        resolver = MethodResolver(build(a), a)
        assert resolver.parent() is None
        assert resolver.action_hooks() == []

    def test_cycle_is_a_resolution_error(self):
        assert issubclass(CyclicInheritanceError, ResolutionError)


class TestActionHooks:

    def test_own_then_parent_then_concerns(self):
        base = Controller(name="ApplicationController", parent_name="X",
                          action_hooks=[before("auth_check")])
        concern = Concern(name="ErrorHandling",
                          action_hooks=[ActionHook(ActionKind.AROUND_ACTION, "catch", "around_action")])
        users = Controller(name="UsersController", parent_name="ApplicationController",
                           action_hooks=[before("load_user")], includes=["ErrorHandling"])
        registry = build(base, concern, users)

        hooks = MethodResolver(registry, users).action_hooks()
        assert [h.target for h in hooks] == ["load_user", "auth_check", "catch"]

    def test_helpers_contribute_no_hooks(self):
        helper = HelperModule(name="Formatting", methods=[method("fmt")])
        users = Controller(name="UsersController", parent_name="X", includes=["Formatting"])
        assert MethodResolver(build(helper, users), users).action_hooks() == []


class TestParams:

    def test_no_parameter_access_is_empty(self):
        users = Controller(name="UsersController", parent_name="X", methods=[
            method("index", calls=["helper"]),
            method("helper", calls=["render"]),
        ])
        resolver = MethodResolver(build(users), users)
        assert resolver.params_for(resolver.method_by_name("index")) == set()

    def test_transitive_params(self):
        users = Controller(name="UsersController", parent_name="X", methods=[
            method("update", params=["id"], calls=["user_params"]),
            method("user_params", params=["user", "name"]),
        ])
        resolver = MethodResolver(build(users), users)
        assert resolver.params_for(resolver.method_by_name("update")) == {"id", "user", "name"}

    def test_mutual_recursion_terminates(self):
        users = Controller(name="UsersController", parent_name="X", methods=[
            method("a", params=["from_a"], calls=["b"]),
            method("b", params=["from_b"], calls=["a"]),
        ])
        resolver = MethodResolver(build(users), users)
        assert resolver.params_for(resolver.method_by_name("a")) == {"from_a", "from_b"}

    def test_unresolved_callees_are_skipped(self):
        users = Controller(name="UsersController", parent_name="X", methods=[
            method("index", params=["q"], calls=["render", "where"]),
        ])
        resolver = MethodResolver(build(users), users)
        assert resolver.params_for(resolver.method_by_name("index")) == {"q"}

    def test_callee_with_same_calls_and_different_args_is_skipped(self):
        users = Controller(name="UsersController", parent_name="X", methods=[
            method("index", params=["q"], calls=["format"]),
            method("format", params=["fmt"], calls=["format"], args=["value"]),
        ])
        resolver = MethodResolver(build(users), users)
        assert resolver.params_for(resolver.method_by_name("index")) == {"q"}

    def test_callee_with_same_calls_and_same_args_is_expanded(self):
        users = Controller(name="UsersController", parent_name="X", methods=[
            method("index", params=["q"], calls=["format"]),
            method("format", params=["fmt"], calls=["format"]),
        ])
        resolver = MethodResolver(build(users), users)
        assert resolver.params_for(resolver.method_by_name("index")) == {"q", "fmt"}

    def test_endpoint_params_union_hooks(self):
        base = Controller(name="ApplicationController", parent_name="X",
                          action_hooks=[before("auth_check")],
                          methods=[method("auth_check", params=["auth_token"])])
        pages = Controller(name="PagesController", parent_name="ApplicationController",
                           action_hooks=[before("load_page")],
                           methods=[method("load_page", params=["index"]),
                                    method("index", calls=["details"]),
                                    method("details", params=["user_id"])])
        registry = build(base, pages)

        params = MethodResolver(registry, pages).endpoint_params("index")
        assert params == {"auth_token", "index", "user_id"}

    def test_missing_action(self):
        users = Controller(name="UsersController", parent_name="X")
        with pytest.raises(ResolutionError) as exc_info:
            MethodResolver(build(users), users).endpoint_params("show", request_id="GET /users/:id")
        assert str(exc_info.value) == "action show not found in controller UsersController for request GET /users/:id"

    def test_missing_hook_target(self):
        users = Controller(name="UsersController", parent_name="X",
                           action_hooks=[before("ghost")], methods=[method("show")])
        with pytest.raises(ResolutionError, match="ghost"):
            MethodResolver(build(users), users).endpoint_params("show")


class TestNamespacedApplicationController:

    BASE = """
        class ApplicationController < ActionController::API
          before_action :authenticate

          def authenticate
            params[:auth_token]
          end
        end
    """

    def resolve_show(self, classify, parent_name):
        registry = build(*classify(self.BASE), *classify(f"""
            module Api
              class ApplicationController < {parent_name}
                def show
                  params[:id]
                end
              end
            end
        """))
        api = registry.get_controller("ApiApplicationController")
        return MethodResolver(registry, api)

    def test_root_anchored_ancestor(self, classify):
        resolver = self.resolve_show(classify, "::ApplicationController")
        assert resolver.parent().qualified_name == "ApplicationController"
        assert resolver.endpoint_params("show") == {"auth_token", "id"}

    def test_bare_ancestor_with_same_name(self, classify):
        resolver = self.resolve_show(classify, "ApplicationController")
        assert resolver.parent().qualified_name == "ApplicationController"
        assert resolver.endpoint_params("show") == {"auth_token", "id"}
