"""
Commands - click command implementations for contract-debugger.

- networks:  list the configured networks
- contracts: list contracts in the descriptor directory
- functions: show the functions of one contract
- call:      invoke one function and print the result
- console:   interactive session over every function of a contract
"""
