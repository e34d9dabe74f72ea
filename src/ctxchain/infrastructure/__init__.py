"""Infrastructure layer — the chain's embedding environment.

Request lifecycle (controller), template rendering (Jinja2), and the
view-helper proxy that templates use to reach into the chain.  This
layer may import from domain and config; it must never import from
services, commands, or output.
"""
