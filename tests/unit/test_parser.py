"""
Tests for the item parser: declaration tree shapes, doc comment desugaring,
attribute capture and parse failures.
"""

import pytest
from docpath.frontend.parser import strip_shebang
from docpath.shared.errors import SourceParseError
from docpath.shared.nodes import (
    FieldStyle, ImplBlock, ItemKind, Module, OtherItem, Record, TaggedUnion,
)


def _doc_texts(attrs):
    return [attr.tokens[1].text for attr in attrs if attr.path == "doc"]


class TestItems:

    def test_item_kinds(self, parse):
        source = """
            extern crate alloc;
            use std::fmt;
            pub mod shapes;
            mod inline {}
            pub struct Crab { legs: u8 }
            enum Color { Red }
            union Bits { a: u32, b: f32 }
            impl Crab {}
            pub trait Walk { fn walk(&self); }
            pub fn cook() {}
            const LIMIT: usize = 3;
            static mut COUNT: u32 = 0;
            type Claw = u8;
            extern "C" { fn abs(x: i32) -> i32; }
            macro_rules! crab { () => {}; }
            thread_local! { static X: u8 = 0; }
        """
        kinds = [item.kind for item in parse(source).items]
        assert kinds == [
            ItemKind.EXTERN_CRATE, ItemKind.USE, ItemKind.MODULE, ItemKind.MODULE,
            ItemKind.STRUCT, ItemKind.ENUM, ItemKind.UNION, ItemKind.IMPL,
            ItemKind.TRAIT, ItemKind.FN, ItemKind.CONST, ItemKind.STATIC,
            ItemKind.TYPE_ALIAS, ItemKind.FOREIGN_MOD, ItemKind.MACRO_RULES,
            ItemKind.MACRO_CALL,
        ]

    def test_item_names(self, parse):
        source = """
            pub struct Crab;
            pub fn cook() {}
            const LIMIT: usize = 3;
            static mut COUNT: u32 = 0;
            type Claw = u8;
            macro_rules! crab { () => {} }
        """
        names = [item.name for item in parse(source).items]
        assert names == ["Crab", "cook", "LIMIT", "COUNT", "Claw", "crab"]

    def test_macro_invocations(self, parse):
        source = """
            bitflags::bitflags! { pub struct Flags: u8 { const A = 1; } }
            lazy_static!(X, u8);
            newtype! Claw { u8 }
        """
        calls = parse(source).items
        assert [(c.macro_path, c.name) for c in calls] == [
            ("bitflags::bitflags", None), ("lazy_static", None), ("newtype", "Claw"),
        ]

    def test_visibility_is_accepted(self, parse):
        source = """
            pub struct A;
            pub(crate) struct B;
            pub(in crate::shapes) struct C;
            struct D;
        """
        assert [item.name for item in parse(source).items] == ["A", "B", "C", "D"]

    def test_external_and_inline_modules(self, parse):
        items = parse("mod outside;\nmod inside { struct Crab; }\n").items
        outside, inside = items
        assert isinstance(outside, Module) and outside.is_external
        assert isinstance(inside, Module) and not inside.is_external
        assert [item.name for item in inside.items] == ["Crab"]

    def test_function_signatures_and_bodies(self, parse):
        source = """
            pub const async unsafe extern "C" fn everything<'a, T: Into<String>>(x: &'a T) -> Vec<T>
            where
                T: Clone,
            {
                let y = x.clone();
                if y > 3 { return vec![]; }
                vec![y]
            }
            fn declared(x: u8) -> u8;
        """
        names = [(item.kind, item.name) for item in parse(source).items]
        assert names == [(ItemKind.FN, "everything"), (ItemKind.FN, "declared")]

    def test_raw_identifiers(self, parse):
        source = "pub struct r#type { r#match: u8 }\nmod r#loop {}\n"
        record, module = parse(source).items
        assert record.name == "type"
        assert record.fields.fields[0].name == "match"
        assert module.name == "loop"

    def test_empty_file(self, parse):
        tree = parse("")
        assert tree.items == []
        assert tree.attrs == []


class TestFields:

    def test_named_fields(self, parse):
        record = parse("pub struct Crab { pub num_legs: u8, name: String }").items[0]
        assert isinstance(record, Record)
        assert record.fields.style is FieldStyle.NAMED
        assert [f.name for f in record.fields.fields] == ["num_legs", "name"]

    def test_positional_fields(self, parse):
        record = parse("pub struct CookedCrab(Crab, pub String);").items[0]
        assert record.fields.style is FieldStyle.POSITIONAL
        assert [f.name for f in record.fields.fields] == [None, None]
        assert [f.ty for f in record.fields.fields] == ["Crab", "String"]

    def test_unit_struct(self, parse):
        record = parse("struct Marker;").items[0]
        assert record.fields.style is FieldStyle.UNIT
        assert record.fields.fields == []

    def test_empty_braces(self, parse):
        record = parse("struct Empty {}").items[0]
        assert record.fields.style is FieldStyle.NAMED
        assert record.fields.fields == []

    def test_generic_field_types(self, parse):
        source = """
            pub struct Tank<'a, T: Clone> where T: Default {
                crabs: Vec<Box<T>>,
                pairs: HashMap<String, (u8, u8)>,
                grid: [[u8; 4]; 4],
                name: &'a str,
                callback: fn(u8) -> u8,
            }
        """
        record = parse(source).items[0]
        assert [f.name for f in record.fields.fields] == ["crabs", "pairs", "grid", "name", "callback"]

    def test_trailing_comma_optional(self, parse):
        a = parse("struct A { x: u8, }").items[0]
        b = parse("struct B(u8, u16,);").items[0]
        assert len(a.fields.fields) == 1
        assert len(b.fields.fields) == 2


class TestEnums:

    def test_variant_shapes(self, parse):
        source = """
            enum LobsterColor {
                Albino,
                SplitColored { primary: Box<LobsterColor>, secondary: Box<LobsterColor> },
                Red(String),
            }
        """
        enum = parse(source).items[0]
        assert isinstance(enum, TaggedUnion)
        styles = [(v.name, v.fields.style) for v in enum.variants]
        assert styles == [
            ("Albino", FieldStyle.UNIT),
            ("SplitColored", FieldStyle.NAMED),
            ("Red", FieldStyle.POSITIONAL),
        ]

    def test_discriminants(self, parse):
        enum = parse("enum Flags { A = 1, B = 1 << 2, C = (3 + 4) * 2 }").items[0]
        assert [v.name for v in enum.variants] == ["A", "B", "C"]

    def test_variant_lookup(self, parse):
        enum = parse("enum E { X, Y }").items[0]
        assert enum.variant("Y").name == "Y"
        assert enum.variant("Z") is None


class TestImplBlocks:

    @pytest.mark.parametrize("header,self_type", [
        ("impl Crab", "Crab"),
        ("impl<T> Tank<T>", "Tank"),
        ("impl fmt::Display for Crab", "Crab"),
        ("impl<'a> From<&'a str> for &'a mut crate::shells::HermitCrab", "HermitCrab"),
        ("impl<T> Walk for Tank<T> where T: Clone", "Tank"),
        ("unsafe impl Send for Crab", "Crab"),
        ("impl<T> Walk for [T]", None),
        ("impl Walk for (u8, u8)", None),
        ("impl dyn Walk", None),
        ("impl !Sync for Crab", "Crab"),
    ])
    def test_self_type(self, parse, header, self_type):
        impl = parse(header + " {}").items[0]
        assert isinstance(impl, ImplBlock)
        assert impl.self_type == self_type

    def test_members(self, parse):
        source = """
            impl Crab {
                /// The crab limit.
                pub const LIMIT: usize = 100;
                /// Claw type.
                type Claw = u8;
                /// Walk sideways.
                pub fn walk(&mut self) { self.x += 1; }
                fn rest(&self);
                crab_methods!();
            }
        """
        impl = parse(source).items[0]
        members = [(m.kind, m.name) for m in impl.members]
        assert members == [
            (ItemKind.CONST, "LIMIT"),
            (ItemKind.TYPE_ALIAS, "Claw"),
            (ItemKind.FN, "walk"),
            (ItemKind.FN, "rest"),
            (ItemKind.MACRO_CALL, None),
        ]
        assert _doc_texts(impl.members[2].attrs) == ['" Walk sideways."']

    def test_inner_attributes(self, parse):
        impl = parse("impl Crab {\n    //! Crab methods.\n    #![allow(unused)]\n}\n").items[0]
        assert [a.path for a in impl.inner_attrs] == ["doc", "allow"]
        assert all(a.is_inner for a in impl.inner_attrs)


class TestDocComments:

    def test_outer_line_docs(self, parse):
        record = parse("/// A crab.\n/// With legs.\nstruct Crab;\n").items[0]
        assert _doc_texts(record.attrs) == ['" A crab."', '" With legs."']
        assert all(not a.is_inner for a in record.attrs)

    def test_inner_line_docs(self, parse):
        tree = parse("//! Crate docs.\n\nstruct Crab;\n")
        assert _doc_texts(tree.attrs) == ['" Crate docs."']
        assert tree.attrs[0].is_inner

    def test_block_docs(self, parse):
        source = "/**\n * Counts crabs.\n *\n * Block comments work too.\n */\nstruct Counter;\n"
        record = parse(source).items[0]
        assert _doc_texts(record.attrs) == ['" Counts crabs."', '""', '" Block comments work too."']

    def test_single_line_block_doc(self, parse):
        record = parse("/** Crabs counted so far. */ struct Counter;").items[0]
        assert _doc_texts(record.attrs) == ['" Crabs counted so far. "']

    def test_nested_block_comment(self, parse):
        source = "/* outer /* inner */ still comment */\n/// A.\npub struct A;\n"
        record = parse(source).items[0]
        assert record.name == "A"
        assert _doc_texts(record.attrs) == ['" A."']

    def test_nested_comment_inside_block_doc(self, parse):
        record = parse("/** Counts /* all */ crabs. */ struct Counter;").items[0]
        assert _doc_texts(record.attrs) == ['" Counts /* all */ crabs. "']

    def test_plain_comments_are_not_docs(self, parse):
        source = "//// rule\n// plain\n/* plain */\n/*** stars */\n/**/\nstruct Crab;\n"
        record = parse(source).items[0]
        assert record.attrs == []

    def test_doc_attribute_form(self, parse):
        record = parse('#[doc = "A crab."]\n#[derive(Debug)]\nstruct Crab;\n').items[0]
        assert [a.path for a in record.attrs] == ["doc", "derive"]
        assert _doc_texts(record.attrs) == ['"A crab."']

    def test_docs_inside_bodies_are_ignored(self, parse):
        source = "fn f() {\n    /// inside\n    let x = 1;\n}\n/// outside\nstruct Crab;\n"
        record = parse(source).items[1]
        assert _doc_texts(record.attrs) == ['" outside"']

    def test_field_and_variant_docs(self, parse):
        source = "enum E {\n    /// Variant.\n    A(\n        /// Field.\n        u8,\n    ),\n}\n"
        variant = parse(source).items[0].variants[0]
        assert _doc_texts(variant.attrs) == ['" Variant."']
        assert _doc_texts(variant.fields.fields[0].attrs) == ['" Field."']

    def test_qualified_attribute_path(self, parse):
        record = parse("#[rustfmt::skip]\nstruct Crab;\n").items[0]
        assert record.attrs[0].path == "rustfmt::skip"

    def test_locations(self, parse):
        record = parse("\n\n/// A crab.\nstruct Crab;\n", "crabs.rs").items[0]
        assert record.attrs[0].location.file == "crabs.rs"
        assert record.attrs[0].location.line == 3


class TestShebang:

    def test_shebang_removed(self):
        assert strip_shebang("#!/usr/bin/env rust-script\nfn main() {}") == "\nfn main() {}"

    def test_inner_attribute_kept(self):
        source = "#![allow(dead_code)]\nstruct Crab;"
        assert strip_shebang(source) == source

    def test_inner_attribute_with_space_kept(self):
        source = "#! [allow(dead_code)]\nstruct Crab;"
        assert strip_shebang(source) == source

    def test_parse_with_shebang(self, parse):
        tree = parse("#!/usr/bin/env run-cargo-script\n//! Script docs.\nstruct Crab;\n")
        assert _doc_texts(tree.attrs) == ['" Script docs."']
        assert tree.attrs[0].location.line == 2


class TestParseErrors:

    def test_unterminated_item(self, parse):
        with pytest.raises(SourceParseError) as exc_info:
            parse("pub struct Crab {\n", "crabs.rs")
        assert exc_info.value.file == "crabs.rs"

    def test_error_location(self, parse):
        with pytest.raises(SourceParseError) as exc_info:
            parse("pub struct Crab {\n    num_legs u8,\n}\n")
        error = exc_info.value
        assert error.location is not None
        assert error.location.line == 2
        assert "u8" in error.message

    def test_unbalanced_body(self, parse):
        with pytest.raises(SourceParseError):
            parse("fn f() { let x = (1, 2; }")

    def test_stray_token(self, parse):
        with pytest.raises(SourceParseError):
            parse("struct Crab; }")
