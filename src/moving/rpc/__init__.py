"""RPC transport: protobuf schema, handlers, interceptor chain, servers."""
