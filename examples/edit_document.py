#!/usr/bin/env python3
"""
docedit - Edit one documentation page and propose the change

This example walks the editing workflow with a personal access token
instead of the browser OAuth flow:
1. Resolve (or create) your fork of the documentation repository
2. Resolve (or create) the edit branch for the page
3. Decode the page, append a paragraph, encode it back
4. Commit and open (or reuse) the pull request

Run with:
    GITHUB_TOKEN=ghp_... python examples/edit_document.py acme/docs docs/guide/intro.md
"""

import logging
import sys

from docedit import GitHubClient, RepositoryWorkflow, branch_name_for, configure_logging
from docedit import transcoder
from docedit.exceptions import DocEditError


def main() -> None:
    """Run the editing workflow for one document."""
    if len(sys.argv) != 3:
        print(f"usage: {sys.argv[0]} OWNER/REPO PATH")
        sys.exit(2)

    upstream, path = sys.argv[1], sys.argv[2]
    owner, name = upstream.split("/", 1)

    configure_logging(level=logging.INFO)

    print("=== docedit workflow example ===\n")

    client = GitHubClient.from_env()
    workflow = RepositoryWorkflow(client, owner, name)

    try:
        # Step 1: Working repository
        print("1. Resolving working repository...")
        repo = workflow.resolve_working_repository()
        print(f"   Repository: {repo.full_name} (fork: {repo.fork})")

        # Step 2: Edit branch
        print("\n2. Resolving edit branch...")
        branch = workflow.resolve_branch(repo, branch_name_for(path))
        print(f"   Branch: {branch.name} @ {branch.sha[:7]}")

        # Step 3: Read and change the document
        print("\n3. Editing document...")
        blob = workflow.fetch_content(repo, branch, path)
        front_matter, html = transcoder.decode(blob.text)
        print(f"   Front matter keys: {sorted(front_matter or {})}")
        text = transcoder.encode(html + "<p>Edited with docedit.</p>", front_matter)

        # Step 4: Commit and propose
        print("\n4. Committing and opening pull request...")
        commit_sha = workflow.commit_content(repo, branch, path, blob, text)
        print(f"   Commit: {commit_sha[:7]}")
        pull = workflow.ensure_pull_request(repo, branch, title=f"Edit {path}")
        print(f"   Pull request #{pull.number}: {pull.html_url}")

        print("\n=== Workflow Complete ===")

    except DocEditError as e:
        print(f"\nError: [{e.code}] {e.message}")
        if e.request_id:
            print(f"Request ID: {e.request_id}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
