from garnet.ast import Node, NodeKind


class Visitor:
    """A pre-order syntax tree walker. Children are visited in source order."""

    def visit(self, node: Node):
        match node.kind:
            case NodeKind.VarField:
                self.visit_var_field(node)
            case NodeKind.VarRef:
                self.visit_var_ref(node)
            case (
                NodeKind.GlobalVar
                | NodeKind.InstanceVar
                | NodeKind.ClassVar
                | NodeKind.Const
                | NodeKind.Ident
            ):
                self.visit_leaf(node)
            case NodeKind.Other:
                self.visit_other(node)

    def visit_children(self, node: Node):
        for child in node.children:
            self.visit(child)

    def visit_var_field(self, node: Node):
        self.visit_children(node)

    def visit_var_ref(self, node: Node):
        self.visit_children(node)

    def visit_leaf(self, node: Node):
        del node

    def visit_other(self, node: Node):
        self.visit_children(node)
