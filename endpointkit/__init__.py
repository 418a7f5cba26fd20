"""Composable HTTP endpoint pipelines with RFC 9457 problem details."""

from endpointkit.client import Client
from endpointkit.client import ClientRequestError
from endpointkit.client import ClientResponseError
from endpointkit.client import Result
from endpointkit.handlers.json_handler import JSONHandler
from endpointkit.handlers.json_handler import Request
from endpointkit.handlers.raw import RawHandler
from endpointkit.params import HeaderParam
from endpointkit.params import PathParam
from endpointkit.params import QueryParam
from endpointkit.pipeline.endpoint import Endpoint
from endpointkit.pipeline.endpoint import EndpointGroup
from endpointkit.pipeline.guards import GuardFunc
from endpointkit.pipeline.guards import GuardStack
from endpointkit.pipeline.interceptors import RequestInterceptorFunc
from endpointkit.pipeline.interceptors import RequestInterceptorStack
from endpointkit.pipeline.interceptors import with_state
from endpointkit.problem.details import DetailedError
from endpointkit.responses import Response
from endpointkit.server import Server

__all__ = [
    "Client",
    "ClientRequestError",
    "ClientResponseError",
    "DetailedError",
    "Endpoint",
    "EndpointGroup",
    "GuardFunc",
    "GuardStack",
    "HeaderParam",
    "JSONHandler",
    "PathParam",
    "QueryParam",
    "RawHandler",
    "Request",
    "RequestInterceptorFunc",
    "RequestInterceptorStack",
    "Response",
    "Result",
    "Server",
    "with_state",
]
