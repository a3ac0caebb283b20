"""``protoc-gen-python_rest``: the protoc plugin entry point.

Usage::

    protoc --python_out=. --python_rest_out=. \
        --python_rest_opt=use_generic_streams=false helloworld.proto
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from google.protobuf.compiler import plugin_pb2

from .codegen.generator import FileGenerator
from .config import GeneratorConfig, config_from_parameter
from .descriptors.adapter import DescriptorAdapter, compiler_version_string
from .errors import RestBindError
from .logconfig import configure_logging

logger = logging.getLogger(__name__)


def generate_response(
    request: plugin_pb2.CodeGeneratorRequest,
    base_config: Optional[GeneratorConfig] = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Run the generator over ``request``.

    Any generation error aborts the whole run: the response then carries the
    error text and no files.
    """
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    try:
        config = config_from_parameter(request.parameter, base_config)
        version = (
            compiler_version_string(request.compiler_version)
            if request.HasField("compiler_version")
            else compiler_version_string(None)
        )
        adapter = DescriptorAdapter(request.proto_file)
        generator = FileGenerator(config, version)
        outputs: List[plugin_pb2.CodeGeneratorResponse.File] = []
        for name in request.file_to_generate:
            generated = generator.generate(adapter.adapt(name))
            if generated is None:
                continue
            out = plugin_pb2.CodeGeneratorResponse.File()
            out.name = generated.filename
            out.content = generated.content()
            outputs.append(out)
    except RestBindError as exc:
        logger.error("Generation failed: %s", exc.format())
        response.error = exc.format()
        return response

    response.file.extend(outputs)
    return response


def main() -> None:
    configure_logging()
    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    response = generate_response(request)
    sys.stdout.buffer.write(response.SerializeToString())


if __name__ == "__main__":
    main()
