"""
Redesign and refinement operations.

Each call issues exactly one request through the given client and returns a
result or a typed Failure. Persisting results is the caller's job.
"""

import time

from landscaper.core.base import GenerationClient
from landscaper.core.catalog import parse_design_catalog
from landscaper.core.models import (
    DesignCatalog,
    GeneratedResult,
    ImageData,
    RedesignConfiguration,
    RefinementModifications,
)
from landscaper.core.reply import interpret_redesign_reply, interpret_refinement_reply
from landscaper.core.translate import failure_from_exception
from landscaper.logging_config import get_logger
from landscaper.utils.exceptions import Failure

logger = get_logger(__name__)


def redesign_outdoor_space(
    client: GenerationClient,
    config: RedesignConfiguration,
    image: ImageData,
) -> GeneratedResult | Failure:
    """
    Redesign the landscape in ``image`` according to ``config``.

    A missing or malformed catalog is not a failure: the result then carries
    an empty catalog and ``catalog_found=False``.

    Args:
        client: Model service handle
        config: The user's design choices
        image: The source photo

    Returns:
        GeneratedResult, or Failure (ContentBlocked, NoCandidates,
        NoImageReturned, UpstreamUnknown)
    """
    start_time = time.time()
    try:
        reply = client.generate(config, image)
    except Exception as e:
        return failure_from_exception(e)

    interpreted = interpret_redesign_reply(reply)
    if isinstance(interpreted, Failure):
        return interpreted

    parsed = parse_design_catalog(interpreted.text)
    catalog = DesignCatalog.from_parsed(parsed)
    logger.info(
        "Redesign completed in %.1fs plants=%d features=%d catalog_found=%s",
        time.time() - start_time,
        len(catalog.plants),
        len(catalog.features),
        parsed is not None,
    )
    return GeneratedResult(image=interpreted.image, catalog=catalog, catalog_found=parsed is not None)


def refine_redesign(
    client: GenerationClient,
    image: ImageData,
    modifications: RefinementModifications,
) -> ImageData | Failure:
    """
    Apply deletions, replacements and additions to an existing design image.

    Only an image comes back; callers keep the catalog of the design being
    refined. With no modifications the model is asked to echo the image
    unchanged.

    Returns:
        The refined image, or Failure (ContentBlocked, NoCandidates,
        NoRefinedImageReturned, UpstreamUnknown)
    """
    if modifications.is_empty():
        logger.info("Refinement requested with no modifications; asking for an unchanged image")
    try:
        reply = client.generate_refinement(image, modifications)
    except Exception as e:
        return failure_from_exception(e)
    return interpret_refinement_reply(reply)
