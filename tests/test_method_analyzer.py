"""Unit tests for MethodAnalyzer.

Tests verify the facts recovered from real method bodies: local variable
re-reads, instance variables, outgoing calls and their rendered arguments.
"""

from paramscope.ast_extractors.ruby_impl import LocalScope, MethodAnalyzer


class TestMethodSignature:

    def test_name_and_arguments(self, analyze):
        profile = analyze("nil", name="update", args="id, options = {}, *rest, **kw, &block")
        assert profile.name == "update"
        assert profile.args == ["id", "options", "rest", "kw", "block"]

    def test_empty_method(self, parse):
        tree = parse("def noop\nend\n")
        method = tree.root_node.named_children[0]
        profile = MethodAnalyzer().analyze(method.child_by_field_name("body"), "noop", [])
        assert profile.name == "noop"
        assert profile.params == set()
        assert profile.method_calls == []

    def test_renders_stay_empty(self, analyze):
        profile = analyze("render json: @user")
        assert profile.renders == []


class TestLocalVariables:
    """Local variable identity follows source position."""

    def test_assignment_and_reads_are_counted(self, analyze):
        profile = analyze("""
            a = 1
            b
            c = 2
            puts c
        """)
        assert profile.local_variable_reads == {"a": 0, "c": 1}
        assert ("b", ()) in profile.method_calls
        assert ("puts", ("c",)) in profile.method_calls

    def test_read_before_assignment_is_a_call(self, analyze):
        profile = analyze("""
            x
            x = 1
        """)
        assert ("x", ()) in profile.method_calls
        assert profile.local_variable_reads == {"x": 0}

    def test_repeated_reads(self, analyze):
        profile = analyze("""
            total = 0
            total += 1
            log(total, total)
        """)
        assert profile.local_variable_reads["total"] == 2

    def test_arguments_are_not_counted(self, analyze):
        profile = analyze("find(id)", args="id")
        assert profile.local_variable_reads == {}
        assert "id" not in profile.called_names()

    def test_multiple_assignment(self, analyze):
        profile = analyze("""
            first, second = pair
            second
        """)
        assert profile.local_variable_reads == {"first": 0, "second": 1}
        assert "pair" in profile.called_names()

    def test_rescue_variable_is_local(self, analyze):
        profile = analyze("""
            begin
              work
            rescue StandardError => e
              report(e)
            end
        """)
        assert "e" not in profile.called_names()
        assert profile.local_variable_reads["e"] == 1

    def test_block_parameters_are_locals(self, analyze):
        profile = analyze("items.each { |item| item.save }")
        assert "item" not in profile.called_names()
        assert "item" not in profile.local_variable_reads
        assert {"each", "items", "save"} <= set(profile.called_names())

    def test_block_parameter_named_params_shadows_the_bag(self, analyze):
        profile = analyze("forms.each do |params| params[:id] end")
        assert profile.params == set()


class TestLocalScope:

    def test_first_assignment_offsets(self, parse):
        tree = parse("def go\n  a = 1\n  a = 2\nend\n")
        method = tree.root_node.named_children[0]
        scope = LocalScope(method.child_by_field_name("body"), [])
        assert list(scope.first_assignment) == ["a"]
        assert scope.is_counted("a")

    def test_arguments_are_never_counted(self, parse):
        tree = parse("def go(a)\n  a = 1\nend\n")
        method = tree.root_node.named_children[0]
        scope = LocalScope(method.child_by_field_name("body"), ["a"])
        assert not scope.is_counted("a")


class TestInstanceVariables:

    def test_assignment_records_instance_variable(self, analyze):
        profile = analyze("@user = User.find(params[:id])")
        assert profile.instance_variables == {"@user"}
        assert profile.params == {"id"}

    def test_operator_assignment(self, analyze):
        profile = analyze("@page ||= 1")
        assert profile.instance_variables == {"@page"}


class TestMethodCalls:
    """Outgoing calls and their rendered arguments."""

    def test_receiverless_call_with_arguments(self, analyze):
        profile = analyze("redirect_to root_path, notice: 'Saved'")
        assert ("redirect_to", ("root_path", "notice=>Saved")) in profile.method_calls
        assert ("root_path", ()) in profile.method_calls

    def test_chained_calls_are_all_recorded(self, analyze):
        profile = analyze("User.where(active: true).order(:name)")
        assert {"where", "order"} <= set(profile.called_names())

    def test_call_order_is_kept_with_duplicates(self, analyze):
        profile = analyze("""
            authorize
            authorize
        """)
        assert profile.called_names() == ["authorize", "authorize"]

    def test_attribute_assignment_is_a_setter_call(self, analyze):
        profile = analyze("@user.name = params[:name]")
        assert ("name=", ("params[name]",)) in profile.method_calls
        assert profile.params == {"name"}

    def test_super_is_not_recorded(self, analyze):
        profile = analyze("super(params[:id])")
        assert "super" not in profile.called_names()
        assert profile.params == {"id"}

    def test_bare_super_is_ignored(self, analyze):
        profile = analyze("super")
        assert profile.method_calls == []

    def test_block_body_is_analyzed(self, analyze):
        profile = analyze("""
            respond_to do |format|
              format.json { render json: lookup(params[:q]) }
            end
        """)
        assert profile.params == {"q"}
        assert "lookup" in profile.called_names()

    def test_lambda_body_is_analyzed(self, analyze):
        profile = analyze("handler = -> { params[:cb] }")
        assert profile.params == {"cb"}

    def test_conditionals_and_loops(self, analyze):
        profile = analyze("""
            if params[:a]
              first
            elsif params[:b]
              second
            else
              third
            end
            while more_pages
              step
            end
            case params[:mode]
            when 'x' then fourth
            end
        """)
        assert profile.params == {"a", "b", "mode"}
        assert {"first", "second", "third", "more_pages", "step", "fourth"} <= set(profile.called_names())

    def test_nested_definitions_are_skipped(self, analyze):
        profile = analyze("""
            def helper
              params[:hidden]
            end
            visible
        """)
        assert profile.params == set()
        assert profile.called_names() == ["visible"]

    def test_hash_values_are_analyzed(self, analyze):
        profile = analyze("render json: { id: params[:id], name: current_user.name }")
        assert profile.params == {"id"}
        assert "current_user" in profile.called_names()
