"""
Property-based tests for commit sign-off verification.

Property: commits_are_signed is False iff at least one commit lacks a
recognised sign-off; an empty range is signed.
"""

from hypothesis import given, strategies as st

from patch_parser.checks.signing import SigningChecker


names = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz ", min_size=1, max_size=20).map(
    lambda s: s.strip() or "Dev"
)
emails = st.builds(
    lambda user, domain: f"{user}@{domain}.org",
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789.", min_size=1, max_size=10),
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=10),
)
subjects = st.text(alphabet="abcdefghijklmnopqrstuvwxyz ", min_size=1, max_size=40)


def commit(message):
    return {'sha': 'deadbeef', 'commit': {'message': message}}


signed_commits = st.builds(
    lambda subject, name, email: commit(f"{subject}\n\nSigned-off-by: {name} <{email}>"),
    subjects, names, emails,
)
unsigned_commits = st.builds(commit, subjects)


class TestSigningProperties:
    """Property tests for SigningChecker."""

    checker = SigningChecker()

    @given(commits=st.lists(signed_commits, max_size=10))
    def test_all_signed(self, commits):
        assert self.checker.commits_are_signed(commits)

    @given(
        signed=st.lists(signed_commits, max_size=10),
        unsigned=st.lists(unsigned_commits, min_size=1, max_size=3),
        data=st.data(),
    )
    def test_any_unsigned_commit_fails(self, signed, unsigned, data):
        commits = data.draw(st.permutations(signed + unsigned))

        assert not self.checker.commits_are_signed(commits)

    @given(commits=st.lists(st.one_of(signed_commits, unsigned_commits), max_size=10))
    def test_matches_per_commit_check(self, commits):
        assert self.checker.commits_are_signed(commits) == all(self.checker.is_signed(c) for c in commits)
