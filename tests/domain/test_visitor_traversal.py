"""Tests for the double-dispatch traversal of the invoice aggregate."""

from invoicing.domain.value_objects import ProductCode, ProductQuantity
from invoicing.domain.visitor import InvoiceVisitor, Visitable


class RecordingVisitor(InvoiceVisitor):
    """Records every callback in order."""

    def __init__(self):
        self.calls = []

    def visit_invoice(self, invoice):
        self.calls.append(("visit_invoice", invoice.id))

    def visit_invoice_item(self, item):
        self.calls.append(("visit_invoice_item", item.product_code.value))

    def leave_invoice(self, invoice):
        self.calls.append(("leave_invoice", invoice.id))


class TestTraversal:
    def test_root_then_lines_then_leave(self, two_line_invoice):
        visitor = RecordingVisitor()

        two_line_invoice.accept(visitor)

        assert visitor.calls == [
            ("visit_invoice", two_line_invoice.id),
            ("visit_invoice_item", "ABCD123"),
            ("visit_invoice_item", "WXYZ999"),
            ("leave_invoice", two_line_invoice.id),
        ]

    def test_each_line_visited_once(self, invoice):
        codes = ["MIKE456", "ABIB123", "ZZZZ000", "ABCD123"]
        for code in codes:
            invoice.add_line(ProductCode(code), ProductQuantity(5))
        visitor = RecordingVisitor()

        invoice.accept(visitor)

        visited = [code for kind, code in visitor.calls if kind == "visit_invoice_item"]
        assert sorted(visited) == sorted(codes)
        assert len(visited) == len(set(visited))

    def test_empty_invoice(self, invoice):
        visitor = RecordingVisitor()

        invoice.accept(visitor)

        assert [kind for kind, _ in visitor.calls] == ["visit_invoice", "leave_invoice"]

    def test_traversal_does_not_mutate(self, two_line_invoice):
        before = two_line_invoice.lines

        two_line_invoice.accept(RecordingVisitor())

        assert two_line_invoice.lines == before

    def test_aggregate_and_lines_are_visitable(self, two_line_invoice):
        assert isinstance(two_line_invoice, Visitable)
        assert all(isinstance(line, Visitable) for line in two_line_invoice.lines)
        assert not isinstance(object(), Visitable)
