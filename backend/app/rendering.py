"""
LoveStack Backend — Conditional Auth Wrapper
==============================================

What:  Decides, per request path, whether page content is wrapped in the
       standard auth-context provider.
How:   Pages are assembled as a small tree of nodes, then serialized to
       HTML. Client-facing routes (/client/...) carry their own client auth
       context, so the standard provider node is left out of their tree.

       /about                  /client/forgot-password
       └─ AuthProvider         └─ <page content>
          └─ <page content>

The decision is a pure function of the path; nothing is remembered between
requests.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from markupsafe import Markup, escape

CLIENT_ROUTE_PREFIX = "/client/"

AUTH_PROVIDER_ATTR = "data-auth-provider"
AUTH_PROVIDER_KIND = "standard"


@dataclass(frozen=True)
class Node:
    tag: str
    attrs: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["Child", ...] = ()


Child = Union[Node, Markup, str]


def is_client_route(path: str) -> bool:
    return path.startswith(CLIENT_ROUTE_PREFIX)


def auth_provider(children: Iterable[Child]) -> Node:
    return Node(
        tag="div",
        attrs=((AUTH_PROVIDER_ATTR, AUTH_PROVIDER_KIND),),
        children=tuple(children),
    )


def wrap_with_auth_provider(path: str, children: Sequence[Child]) -> Tuple[Child, ...]:
    """Children unchanged on client routes, inside an AuthProvider otherwise."""
    if is_client_route(path):
        return tuple(children)
    return (auth_provider(children),)


def is_auth_provider(child: Child) -> bool:
    return isinstance(child, Node) and (AUTH_PROVIDER_ATTR, AUTH_PROVIDER_KIND) in child.attrs


def contains_auth_provider(children: Iterable[Child]) -> bool:
    for child in children:
        if is_auth_provider(child):
            return True
        if isinstance(child, Node) and contains_auth_provider(child.children):
            return True
    return False


def render_nodes(children: Iterable[Child]) -> Markup:
    parts = []
    for child in children:
        if isinstance(child, Node):
            attrs = "".join(f' {name}="{escape(value)}"' for name, value in child.attrs)
            parts.append(f"<{child.tag}{attrs}>{render_nodes(child.children)}</{child.tag}>")
        else:
            # Markup passes through; plain strings are escaped
            parts.append(str(escape(child)))
    return Markup("".join(parts))
