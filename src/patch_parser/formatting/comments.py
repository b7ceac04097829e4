"""
PR Comment Formatter

Builds the markdown bodies of the comments the pipeline posts:
sign-off instructions, merge conflict notice and format violations.
"""

import logging

from ..models.event import PullRequestEvent
from ..models.review import FormatReport


logger = logging.getLogger(__name__)


class CommentFormatter:
    """
    Formats user-facing pull request comments.

    PR comments are the only channel through which contributors learn
    about failed checks.
    """

    def __init__(self, contributing_url: str, clone_dir: str = "somewhere"):
        """
        Initialize comment formatter.

        Args:
            contributing_url: Link to the project's sign-off rules
            clone_dir: Directory name used in the console recipe
        """
        self.contributing_url = contributing_url
        self.clone_dir = clone_dir

        # GitHub's comment limit
        self.max_comment_length = 65536

    def signing_instructions(self, event: PullRequestEvent) -> str:
        """
        Explain how to sign off the commits of a pull request.

        The rebase steps are only included when there is more than one commit.
        The clone step is left out when the head repository no longer exists.
        """
        lines = [
            "Can you please sign your commits following these rules:",
            "",
            self.contributing_url,
            "",
            "The easiest way to do this is to amend the last commit:",
            "",
            "~~~console",
        ]
        clone_url = event.head_ssh_url or event.head_clone_url
        if clone_url:
            lines.append(f'$ git clone -b "{event.head_ref}" {clone_url} {self.clone_dir}')
            lines.append(f"$ cd {self.clone_dir}")
        if event.commits > 1:
            lines.extend([
                f"$ git rebase -i HEAD~{event.commits}",
                "editor opens",
                "change each 'pick' to 'edit'",
                "save the file and quit",
            ])
        lines.append("$ git commit --amend -s --no-edit")
        if event.commits > 1:
            lines.append("$ git rebase --continue # and repeat the amend for each commit")
        lines.append("$ git push -f")
        lines.append("~~~")

        return "\n".join(lines)

    def merge_conflict_notice(self) -> str:
        return (
            "Looks like we would not be able to merge this PR because of conflicts. "
            "Please fix them and force push to your branch."
        )

    def format_violations(self, report: FormatReport) -> str:
        """
        List unformatted files, one per line, in diff order.

        When the list does not fit in one comment, only whole paths are kept
        and the number of omitted files is noted above the instructions.
        """
        header = "These files are not properly formatted:\n"
        if report.fix_command:
            footer = f"Please reformat the above files using `{report.fix_command}` and amend the result to the commit."
        else:
            footer = "Please reformat the above files and amend the result to the commit."

        paths = list(report.violations)
        body = header + "".join(f"{path}\n" for path in paths) + footer
        if len(body) <= self.max_comment_length:
            return body

        # reserve room for the largest possible omission note
        note_room = len(f"... and {len(paths)} more files\n")
        budget = self.max_comment_length - len(header) - len(footer) - note_room
        listed = []
        for path in paths:
            line = f"{path}\n"
            if len(line) > budget:
                break
            listed.append(line)
            budget -= len(line)

        omitted = len(paths) - len(listed)
        logger.warning(f"Format comment lists {len(listed)} of {len(paths)} files")
        return header + "".join(listed) + f"... and {omitted} more files\n" + footer
