"""
restbind: REST binding compiler for protobuf services.

This package turns resolved protobuf descriptors into Python client and
server bindings for a REST-flavored RPC transport.  A ``protoc`` run hands
the plugin a set of ``FileDescriptorProto`` records; for each ``.proto``
file that declares services, ``restbind`` emits one ``*_pb2_rest.py``
module next to the ``*_pb2.py`` module produced by ``protoc --python_out``.

The code is organised into several modules:

* ``descriptors`` – the data model (services, methods, HTTP bindings) and
  the adapter that builds it from ``descriptor_pb2`` records, including
  ``google.api.http`` route annotations and leading comments.
* ``codegen`` – the compiler proper.  It classifies every method by its
  streaming shape, names the generated symbols, emits the client call
  surface and the server handler surface, and assembles the route table
  mapping HTTP verb+path pairs to handlers.
* ``runtime`` – the transport contract the generated modules import.
* ``plugin`` and ``cli`` – the ``protoc-gen-python_rest`` entry point and
  the ``restbind`` command line tool.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
