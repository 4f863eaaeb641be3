"""
Debugger - catalog, form state, dispatch, result log and session control.

- catalog:  discover and parse contract descriptor files
- forms:    raw per-function input values
- dispatch: coerce inputs, call or transact, normalize and record results
- results:  in-memory history of invocation outcomes
- session:  top-level controller tying them to a network and a wallet
"""
