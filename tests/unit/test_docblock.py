from brainmap.introspect.docblock import parse_doc_tags, properties_from_tags
from brainmap.types import DocTag, PropertyRecord


def test_parse_doc_tags_reads_kind_type_and_name() -> None:
    doc = """Charges the customer.

    @property-read str email
    @property int $id
    """

    assert parse_doc_tags(doc) == [
        DocTag(kind="property-read", type="str", name="email"),
        DocTag(kind="property", type="int", name="id"),
    ]


def test_bracketed_types_with_spaces_stay_whole() -> None:
    tags = parse_doc_tags("@property dict[str, list[int]] totals  running totals per user")

    assert tags == [DocTag(kind="property", type="dict[str, list[int]]", name="totals")]


def test_single_operand_defaults_type_to_mixed() -> None:
    assert parse_doc_tags("@property payload") == [
        DocTag(kind="property", type="mixed", name="payload")
    ]


def test_missing_docstring_yields_no_tags() -> None:
    assert parse_doc_tags(None) == []
    assert parse_doc_tags("") == []
    assert properties_from_tags(parse_doc_tags(None)) == []


def test_unknown_kinds_are_dropped_from_properties() -> None:
    tags = parse_doc_tags(
        """
        @deprecated
        @see brain.example.tasks.example_task.ExampleTask
        @property-write str secret
        """
    )

    assert [tag.kind for tag in tags] == ["see", "property-write"]
    assert properties_from_tags(tags) == []


def test_outputs_sort_before_inputs_and_keep_declaration_order() -> None:
    tags = parse_doc_tags(
        """
        @property int id
        @property-read str email
        @property str note
        @property-read int payment_id
        """
    )

    assert properties_from_tags(tags) == [
        PropertyRecord(name="email", type="str", direction="output"),
        PropertyRecord(name="payment_id", type="int", direction="output"),
        PropertyRecord(name="id", type="int", direction="input"),
        PropertyRecord(name="note", type="str", direction="input"),
    ]


def test_unbalanced_brackets_do_not_swallow_the_name() -> None:
    tags = parse_doc_tags("@property list[int id\n@property-read str email")

    assert tags[0] == DocTag(kind="property", type="list[int", name="id")
    assert [record.name for record in properties_from_tags(tags)] == ["email", "id"]


def test_property_names_must_be_identifiers() -> None:
    tags = parse_doc_tags("@property-read str user.email\n@property int id")

    assert properties_from_tags(tags) == [PropertyRecord(name="id", type="int", direction="input")]
