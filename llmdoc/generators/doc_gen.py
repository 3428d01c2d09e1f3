"""Documentation generation for scanned projects.

Runs the generation stages in order: one document per configured
subfolder (with import-resolved context), one API reference for files
outside every subfolder, and the project README. Each document is
written as soon as it is generated; a failing call stops the run but
leaves earlier documents on disk. In dry-run mode nothing is sent or
written, but every target still yields a placeholder with its real
source files and token estimate.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from llmdoc.generators.llm_client import LLMClient
from llmdoc.output.markdown import (
    MarkdownWriter,
    format_files_for_llm,
    format_files_with_context,
    get_files_summary,
)
from llmdoc.scanner.context import load_additional_files, resolve_imports_for_files
from llmdoc.scanner.models import IndexedFile, ScanResult
from llmdoc.utils.config import AppConfig, SubfolderConfig
from llmdoc.utils.tokens import (
    TokenEstimate,
    aggregate_estimates,
    format_token_estimate,
    get_token_estimate,
)

logger = logging.getLogger(__name__)

DRY_RUN_PLACEHOLDER = "[DRY RUN - No content generated]"
README_PATH = "README.md"
API_REFERENCE_NAME = "api-reference.md"


class Stage(str, Enum):
    """Stages of a documentation run."""

    INIT = "init"
    SCAN = "scan"
    LLM_INIT = "llm_init"
    DRY_RUN_SKIP = "dry_run_skip"
    GENERATE_SUBFOLDERS = "generate_subfolders"
    GENERATE_UNGROUPED = "generate_ungrouped"
    GENERATE_README = "generate_readme"
    DONE = "done"


@dataclass
class GeneratedDoc:
    """A generated (or, in dry-run, previewed) documentation file.

    Attributes:
        output_path: Root-relative path the document is written to.
        content: Generated Markdown, or a placeholder in dry-run.
        source_files: Paths of the main files followed by the context files.
    """

    output_path: str
    content: str
    source_files: list[str] = field(default_factory=list)


@dataclass
class _TargetResult:
    doc: GeneratedDoc
    estimate: TokenEstimate


class DocumentationGenerator:
    """Generates all documentation for a scanned project."""

    def __init__(
        self,
        llm_client: Optional[LLMClient],
        config: AppConfig,
        root_dir: Union[str, Path],
        dry_run: bool = False,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            llm_client: Provider client. May be None in dry-run mode.
            config: Application configuration.
            root_dir: Project root directory.
            dry_run: Preview scope and cost without calling the LLM or
                writing files.
            log: Logger for progress messages. Defaults to the module logger.
        """
        self.llm = llm_client
        self.config = config
        self.root_dir = Path(root_dir)
        self.dry_run = dry_run
        self.log = log or logger
        self.writer = MarkdownWriter(self.root_dir)
        self.stage = Stage.INIT
        self.docs: list[GeneratedDoc] = []
        self.estimates: list[TokenEstimate] = []

    @property
    def model(self) -> str:
        return self.config.llm.model

    @property
    def total_estimate(self) -> TokenEstimate:
        """Aggregate estimate over every request of the last run."""
        return aggregate_estimates(self.estimates)

    def generate(self, scan_result: ScanResult) -> list[GeneratedDoc]:
        """Generate every document for a scan result.

        Args:
            scan_result: Scanned and grouped project files.

        Returns:
            The generated documents in generation order.

        Raises:
            ValueError: If no LLM client is set outside dry-run mode.
            GenerationError: If a generation call fails.
        """
        if not self.dry_run and self.llm is None:
            raise ValueError("LLM client is required when not in dry-run mode")

        docs: list[GeneratedDoc] = []
        self.docs = docs
        self.estimates = []

        self._enter(Stage.GENERATE_SUBFOLDERS)
        for subfolder in self.config.subfolders:
            files = scan_result.grouped.get(subfolder.path, [])
            self._collect(docs, self._generate_subfolder(subfolder, files, scan_result.files))

        self._enter(Stage.GENERATE_UNGROUPED)
        self._collect(docs, self._generate_ungrouped(scan_result.ungrouped))

        self._enter(Stage.GENERATE_README)
        self._collect(docs, self._generate_readme(scan_result.files))

        if self.dry_run:
            self.log.info("-" * 50)
            self.log.info("TOTAL ESTIMATES (all LLM calls combined):")
            self.log.info(format_token_estimate(self.total_estimate, self.model))

        self._enter(Stage.DONE)
        return docs

    def _enter(self, stage: Stage) -> None:
        self.stage = stage
        self.log.debug("Stage: %s", stage.value)

    def _collect(self, docs: list[GeneratedDoc], result: Optional[_TargetResult]) -> None:
        if result is None:
            return
        docs.append(result.doc)
        self.estimates.append(result.estimate)
        if not self.dry_run:
            self.writer.write(result.doc.output_path, result.doc.content)

    def resolve_context_files(
        self,
        subfolder: SubfolderConfig,
        files: list[IndexedFile],
        all_files: list[IndexedFile],
    ) -> list[IndexedFile]:
        """Collect import-resolved and additional context files for a subfolder.

        Args:
            subfolder: The subfolder target.
            files: Main files of the subfolder.
            all_files: Every scanned file, reused for resolved imports.

        Returns:
            Context files, imports first, none of them among the main files.
        """
        main_paths = {f.path for f in files}
        context_files: list[IndexedFile] = []

        if subfolder.include_imports:
            self.log.debug(
                "Resolving imports for subfolder: %s (depth: %d)",
                subfolder.path,
                subfolder.import_depth,
            )
            imported = resolve_imports_for_files(
                files, all_files, self.root_dir, subfolder.import_depth, log=self.log
            )
            context_files = [f for f in imported if f.path not in main_paths]
            if context_files:
                self.log.info("Found %d imported files for context", len(context_files))

        if subfolder.additional_files:
            included = main_paths | {f.path for f in context_files}
            additional = load_additional_files(
                self.root_dir,
                subfolder.additional_files,
                self.config.exclude,
                included,
                log=self.log,
            )
            if additional:
                self.log.info("Added %d additional context files", len(additional))
                context_files.extend(additional)

        return context_files

    def _generate_subfolder(
        self,
        subfolder: SubfolderConfig,
        files: list[IndexedFile],
        all_files: list[IndexedFile],
    ) -> Optional[_TargetResult]:
        if not files:
            self.log.warning("No files found in subfolder: %s", subfolder.path)
            return None

        prompt = subfolder.prompt or self.config.prompt
        output_path = subfolder.output_path or f"{subfolder.path.rstrip('/')}/README.md"
        existing_docs = self.writer.read_existing(subfolder.existing_docs or output_path)

        context_files = self.resolve_context_files(subfolder, files, all_files)
        self.log.info(
            "Processing subfolder: %s (%d main + %d context = %d files)",
            subfolder.path,
            len(files),
            len(context_files),
            len(files) + len(context_files),
        )

        files_content = format_files_with_context(files, context_files)
        estimate = self._estimate(prompt, files_content, existing_docs)
        source_files = [f.path for f in files + context_files]

        if self.dry_run:
            self.log.info("[DRY RUN] Would generate docs for: %s", output_path)
            self.log.info("Main files:\n%s", get_files_summary(files))
            if context_files:
                self.log.info(
                    "Context files (imports & additional):\n%s",
                    get_files_summary(context_files),
                )
            self.log.info("Token estimate:\n%s", format_token_estimate(estimate, self.model))
            return self._placeholder(output_path, source_files, estimate)

        content = self.llm.generate_documentation(prompt, files_content, existing_docs)
        return _TargetResult(GeneratedDoc(output_path, content, source_files), estimate)

    def _generate_ungrouped(self, files: list[IndexedFile]) -> Optional[_TargetResult]:
        if not files:
            self.log.debug("No ungrouped files to process")
            return None

        output_path = f"{self.config.output_dir_path}/{API_REFERENCE_NAME}"
        existing_docs = self.writer.read_existing(output_path)
        files_content = format_files_for_llm(files)
        estimate = self._estimate(self.config.prompt, files_content, existing_docs)
        source_files = [f.path for f in files]

        self.log.info("Processing ungrouped files (%d files)", len(files))

        if self.dry_run:
            self.log.info(
                "[DRY RUN] Would generate API reference for:\n%s",
                get_files_summary(files),
            )
            self.log.info("Token estimate:\n%s", format_token_estimate(estimate, self.model))
            return self._placeholder(output_path, source_files, estimate)

        content = self.llm.generate_api_reference(
            self.config.prompt, files_content, existing_docs
        )
        return _TargetResult(GeneratedDoc(output_path, content, source_files), estimate)

    def _generate_readme(self, all_files: list[IndexedFile]) -> _TargetResult:
        project_name = self.root_dir.resolve().name
        existing_readme = self.writer.read_existing(README_PATH)
        files_content = format_files_for_llm(all_files)
        estimate = self._estimate(self.config.prompt, files_content, existing_readme)
        source_files = [f.path for f in all_files]

        self.log.info("Generating %s...", README_PATH)

        if self.dry_run:
            self.log.info(
                "[DRY RUN] Would update %s based on %d files", README_PATH, len(all_files)
            )
            self.log.info("Token estimate:\n%s", format_token_estimate(estimate, self.model))
            return self._placeholder(README_PATH, source_files, estimate)

        content = self.llm.generate_readme(
            self.config.prompt, files_content, project_name, existing_readme
        )
        return _TargetResult(GeneratedDoc(README_PATH, content, source_files), estimate)

    def _estimate(
        self, prompt: str, files_content: str, existing_docs: Optional[str]
    ) -> TokenEstimate:
        full_input = prompt + "\n\n" + files_content
        if existing_docs:
            full_input += "\n\n" + existing_docs
        return get_token_estimate(full_input, self.model, is_code=True)

    @staticmethod
    def _placeholder(
        output_path: str, source_files: list[str], estimate: TokenEstimate
    ) -> _TargetResult:
        return _TargetResult(
            GeneratedDoc(output_path, DRY_RUN_PLACEHOLDER, source_files), estimate
        )
