from modeleval.io.var_context import DictVarContext, VarContext

__all__ = ["VarContext", "DictVarContext"]
