"""Tests for generated identifier naming."""

import itertools

import pytest

from restbind.codegen import naming
from restbind.errors import NameCollisionError


class TestCaseFolding:
    def test_unexport_changes_only_first_character(self):
        assert naming.unexport("GreeterClient") == "greeterClient"
        assert naming.unexport("HTTPService") == "hTTPService"
        assert naming.unexport("") == ""

    def test_export_changes_only_first_character(self):
        assert naming.export("greeter") == "Greeter"
        assert naming.export("x") == "X"

    def test_non_ascii_first_character(self):
        assert naming.unexport("Élan") == "élan"
        assert naming.export("über") == "Über"


class TestSymbolSchemes:
    def test_greeter_names(self):
        assert naming.full_method_symbol("Greeter", "SayHello") == "Greeter_SayHello_FullMethodName"
        assert naming.full_method_path("helloworld.Greeter", "SayHello") == "/helloworld.Greeter/SayHello"
        assert naming.handler_name("Greeter", "SayHello") == "_Greeter_SayHello_RestHandler"
        assert naming.route_table_name("Greeter") == "GreeterRestServiceDesc"
        assert naming.server_type_name("Greeter") == "GreeterServer"
        assert naming.client_interface_name("Greeter") == "GreeterClient"
        assert naming.client_holder_name("Greeter") == "greeterClient"
        assert naming.client_constructor_name("Greeter") == "NewGreeterClient"

    def test_stream_names(self):
        assert naming.stream_interface_name("Chat", "Converse") == "Chat_ConverseClient"
        assert naming.stream_wrapper_name("Chat", "Converse") == "chatConverseClient"

    def test_schemes_are_injective_for_distinct_pairs(self):
        services = ["Greeter", "Chat", "Items"]
        methods = ["SayHello", "Converse", "ListItems", "Get"]
        pairs = list(itertools.product(services, methods))
        schemes = [
            naming.full_method_symbol,
            naming.handler_name,
            naming.stream_interface_name,
            naming.stream_wrapper_name,
        ]
        for scheme in schemes:
            produced = {scheme(service, method) for service, method in pairs}
            assert len(produced) == len(pairs), scheme.__name__


class TestModuleNames:
    @pytest.mark.parametrize(
        "proto_file, module, alias",
        [
            ("helloworld.proto", "helloworld_pb2", "helloworld__pb2"),
            ("chat/v1/chat.proto", "chat.v1.chat_pb2", "chat_dot_v1_dot_chat__pb2"),
            ("a/b/c-d.proto", "a.b.c_d_pb2", "a_dot_b_dot_c__d__pb2"),
            ("shop/my_items.proto", "shop.my_items_pb2", "shop_dot_my__items__pb2"),
        ],
    )
    def test_pb2_module_and_alias(self, proto_file, module, alias):
        assert naming.pb2_module_name(proto_file) == module
        assert naming.pb2_module_alias(proto_file) == alias

    def test_qualified_nested_type(self):
        assert naming.qualified_type("chat/v1/chat.proto", "Room.Member") == (
            "chat_dot_v1_dot_chat__pb2.Room.Member"
        )

    def test_generated_filename(self):
        assert naming.generated_filename("chat/v1/chat.proto", "_pb2_rest.py") == (
            "chat/v1/chat_pb2_rest.py"
        )


class TestSymbolScope:
    def test_claim_returns_name(self):
        scope = naming.SymbolScope("x.proto")
        assert scope.claim("GreeterClient", "service Greeter") == "GreeterClient"
        assert "GreeterClient" in scope
        assert len(scope) == 1

    def test_duplicate_claim_raises(self):
        scope = naming.SymbolScope("x.proto")
        scope.claim("A_B_C_FullMethodName", "method A_B.C")
        with pytest.raises(NameCollisionError) as excinfo:
            scope.claim("A_B_C_FullMethodName", "method A.B_C")
        assert "method A_B.C" in str(excinfo.value)
        assert excinfo.value.path == "x.proto"
        assert excinfo.value.code == "RB003"
