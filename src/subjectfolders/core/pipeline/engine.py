from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates one scheduled run:
1. Verifies the setup (data root, specification, template directory).
2. Loads the declared hierarchy from the specification file.
3. Reconciles it against the data root, provisioning subject folders.
4. Renders the HTML index from the reconciled tree.
5. Delivers the consolidated warning (log, webhook, console broadcast).
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from subjectfolders.core.pipeline.validator import check_reconcile_setup
from subjectfolders.core.provision.provisioner import LeafProvisioner
from subjectfolders.core.reconcile.ignore import IgnoreMatcher
from subjectfolders.core.reconcile.reconciler import TreeReconciler
from subjectfolders.core.render.index_composer import build_fragments, write_index
from subjectfolders.core.render.tree_renderer import render_full_markup, render_top_level_markup
from subjectfolders.core.report.warnings import build_warning_message, warning_payload
from subjectfolders.core.spec.loader import load_spec_tree
from subjectfolders.domain.config import AppConfig
from subjectfolders.domain.errors import RenderError, SetupError
from subjectfolders.domain.run_models import (
    RunResult,
    create_error_result,
    create_success_result,
)
from subjectfolders.domain.tree_models import RunError, TreeNode
from subjectfolders.infra.fs import LocalFileSystem
from subjectfolders.infra.network import broadcast_console, post_webhook
from subjectfolders.infra.permissions import PermissionBackend, PermissionEntry, default_backend
from subjectfolders.infra.shortcuts import ShortcutWriter

logger = logging.getLogger(__name__)


def run_pipeline(
        cfg: AppConfig,
        *,
        dry_run: bool = False,
        write_html: bool = True,
        include_contents: bool = False,
        notify: bool = True,
        fs: Optional[LocalFileSystem] = None,
        permission_backend: Optional[PermissionBackend] = None,
        clock: Callable[[], datetime] = datetime.now,
        log: Optional[logging.Logger] = None,
) -> RunResult:
    """
    Execute a full reconcile-and-render run.

    Args:
        cfg: Validated configuration.
        dry_run: Report differences without creating or provisioning anything.
        write_html: Render and write the HTML index.
        include_contents: Emit each leaf's contents preview in the index.
        notify: Deliver the warning through the configured channels.
        fs: Filesystem collaborator.
        permission_backend: Permission backend (platform default when None).
        clock: Source of the current time.
        log: Logger shared by every stage.

    Returns:
        RunResult: Status, differences, errors and index location.
    """
    log = log or logger
    fs = fs or LocalFileSystem()
    log.info("Run started." + (" (dry run)" if dry_run else ""))

    # -------------------------------------------------------------------------
    # 1) Setup
    # -------------------------------------------------------------------------
    try:
        check_reconcile_setup(cfg)
        tree = load_spec_tree(cfg.spec_file, max_depth=cfg.max_depth, log=log)
    except SetupError as e:
        log.critical(f"Setup failed: {e}")
        return create_error_result(str(e), cfg.data_root, dry_run)

    # -------------------------------------------------------------------------
    # 2) Reconciliation & provisioning
    # -------------------------------------------------------------------------
    provisioner = None
    if not dry_run:
        provisioner = build_provisioner(cfg, fs, permission_backend, log)

    reconciler = TreeReconciler(
        fs=fs,
        provisioner=provisioner,
        ignore=IgnoreMatcher(cfg.ignore_rules),
        create_missing=cfg.create_missing and not dry_run,
        reprovision_existing=cfg.reprovision_existing,
        max_depth=cfg.max_depth,
        clock=clock,
        log=log,
    )
    report = reconciler.reconcile(cfg.data_root, tree)

    # -------------------------------------------------------------------------
    # 3) HTML index
    # -------------------------------------------------------------------------
    render_errors: List[RunError] = []
    index_written = False
    if write_html and not dry_run:
        try:
            render_index(cfg, tree, include_contents=include_contents, now=clock())
            index_written = True
        except RenderError as e:
            log.error(f"Index not regenerated: {e}")
            render_errors.append(RunError(path=cfg.html_output, operation="render", message=str(e)))

    result = create_success_result(
        cfg.data_root,
        tree,
        report,
        dry_run=dry_run,
        index_path=cfg.html_output,
        index_written=index_written,
        extra_errors=render_errors,
    )

    # -------------------------------------------------------------------------
    # 4) Consolidated warning
    # -------------------------------------------------------------------------
    message = build_warning_message(result.differences, result.errors)
    if message:
        log.warning("Run finished with warnings:\n" + message)
        if notify and not dry_run:
            deliver_warning(cfg, result, message, log)
    else:
        log.info("Run finished: folder tree matches the specification.")

    return result


def build_provisioner(
        cfg: AppConfig,
        fs: LocalFileSystem,
        permission_backend: Optional[PermissionBackend],
        log: logging.Logger,
) -> LeafProvisioner:
    """Assemble the Leaf Provisioner from configuration."""
    writer = ShortcutWriter(
        name=cfg.shortcut_name,
        target=cfg.shortcut_target,
        arguments=cfg.shortcut_arguments,
        config_path=cfg.config_path,
    )
    backend = None
    entries: List[PermissionEntry] = []
    if cfg.permissions_enabled:
        backend = permission_backend or default_backend()
        entries = [PermissionEntry(principal=cfg.permission_principal, rights=cfg.permission_rights)]
    return LeafProvisioner(
        cfg.template_dir,
        shortcut_writer=writer,
        permission_backend=backend,
        desired_entries=entries,
        fs=fs,
        log=log,
    )


def render_index(
        cfg: AppConfig,
        tree: TreeNode,
        *,
        include_contents: bool = False,
        now: Optional[datetime] = None,
) -> str:
    """Render both tree fragments and splice them into the index template."""
    fragments = build_fragments(
        render_top_level_markup(tree),
        render_full_markup(
            cfg.data_root, tree, recent_days=cfg.recent_days, include_contents=include_contents
        ),
        now=now,
    )
    return write_index(cfg.html_template, cfg.html_output, fragments)


def deliver_warning(cfg: AppConfig, result: RunResult, message: str, log: logging.Logger) -> None:
    """Send the warning through the configured channels; failures are only logged."""
    if cfg.webhook_url:
        ok, detail = post_webhook(cfg.webhook_url, message, warning_payload(result.differences, result.errors))
        if not ok:
            log.warning(f"Webhook notification not delivered: {detail}")
    if cfg.broadcast:
        ok, detail = broadcast_console(message)
        if not ok:
            log.warning(f"Console broadcast not delivered: {detail}")
