"""Constants for the remote API hosts and the ports used to reach them."""

# Hosts
GRAPH_SERVER = "graph.facebook.com"
REST_SERVER = "api.facebook.com"

# Ports
HTTP_PORT = 80
HTTPS_PORT = 443

# Verbs sent on the wire; anything else is tunnelled through POST
SUPPORTED_VERBS = ("get", "post")

DEFAULT_TIMEOUT_SECONDS = 30.0
