"""
Changelog generation pipeline.

Resolving -> Fetching (GitHub mode only) -> Prompting -> Invoking -> Packaging.
Each step runs once, in order; nothing is retried or kept between requests.
"""

import logging
from typing import Callable, Optional

from .errors import EmptyInputError, MissingRepoIdentityError
from .fetcher import GitHubFetcher, render_commits
from .generator import ChangelogWriter, package_result
from .models import GenerationResult, SourceType
from .prompt import build_prompt
from .schemas import GenerationRequest

logger = logging.getLogger("changelog-generator.pipeline")

FetcherFactory = Callable[[Optional[str]], GitHubFetcher]


def resolve_raw_material(request: GenerationRequest, fetcher_factory: FetcherFactory) -> str:
    """
    Turn a request into the raw material for the prompt.

    Manual requests use their content. GitHub requests are checked for a
    repository identity before any network call, then their commits are
    fetched and rendered one per line.

    Args:
        request: Parsed generation request
        fetcher_factory: Builds a fetcher for the request's access token

    Returns:
        Non-empty raw material

    Raises:
        EmptyInputError: If no usable material is left
        MissingRepoIdentityError: If owner or repo is missing in GitHub mode
        UpstreamFetchError: If fetching the commits fails
    """
    if request.source_type is SourceType.MANUAL:
        material = (request.content or "").strip()
        if not material:
            raise EmptyInputError("No content to process. Please provide manual input.", field="content")
        return material

    config = request.source_config
    if config is None or not (config.owner or "").strip():
        raise MissingRepoIdentityError("Owner and Repo required for GitHub source", field="githubConfig.owner")
    if not (config.repo or "").strip():
        raise MissingRepoIdentityError("Owner and Repo required for GitHub source", field="githubConfig.repo")

    logger.debug("Fetching commits for %s/%s", config.owner, config.repo)
    fetcher = fetcher_factory(config.token)
    commits = fetcher.fetch_commits(config.owner, config.repo, config.from_tag, config.to_tag)
    if not commits:
        raise EmptyInputError(
            f"No commits found for {config.owner}/{config.repo}.", field="githubConfig"
        )
    return render_commits(commits)


class ChangelogPipeline:
    """
    Run one generation request from raw input to packaged result.

    Args:
        writer: Generation backend invoker
        fetcher_factory: Builds a GitHubFetcher for a token (default: GitHubFetcher)
    """

    def __init__(self, writer: ChangelogWriter, fetcher_factory: Optional[FetcherFactory] = None) -> None:
        self.writer = writer
        self.fetcher_factory = fetcher_factory or (lambda token: GitHubFetcher(token=token))

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate a changelog for a parsed request.

        Raises:
            ValidationError: For empty input or a missing repository identity
            UpstreamFetchError: If the GitHub call fails; no generation is attempted
            GenerationBackendError: If the generation backend call fails
        """
        logger.debug("Resolving %s request", request.source_type.value)
        material = resolve_raw_material(request, self.fetcher_factory)

        logger.debug("Building prompt (%s, %s)", request.format.value, request.template.value)
        prompt = build_prompt(material, request.format, request.template, request.instructions)

        text = self.writer.write(prompt)
        result = package_result(text)
        logger.info("Changelog generated from %s input", request.source_type.value)
        return result
