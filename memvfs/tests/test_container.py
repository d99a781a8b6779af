#!/usr/bin/env python3
"""
Container Tests

Tree creation, removal, moves and metadata changes by path.

Run with: python -m pytest memvfs/tests/test_container.py -v

Author: YSNRFD
Version: 1.0.0
"""

import unittest

from memvfs.core import ConfigLoader, FilesystemConfig
from memvfs.exceptions import (
    NotFoundError,
    AlreadyExistsError,
    InvalidOperationError,
    DirectoryNotEmptyError,
)
from memvfs.filesystem import Container, Directory, File
from memvfs.logger import Logger, LogLevel


def make_container() -> Container:
    return Container(FilesystemConfig(default_uid=1000, default_gid=100))


class TestCreation(unittest.TestCase):
    """Test node creation."""

    def setUp(self):
        self.fs = make_container()

    def test_root(self):
        """Test the root directory."""
        self.assertIsInstance(self.fs.root, Directory)
        self.assertTrue(self.fs.has_node_at('/'))
        self.assertTrue(self.fs.is_dir('/'))
        self.assertIs(self.fs.node_at(''), self.fs.root)
        self.assertEqual(self.fs.list_dir('/'), [])

    def test_create_dir(self):
        """Test directory creation."""
        directory = self.fs.create_dir('/dir')

        self.assertTrue(self.fs.has_node_at('/dir'))
        self.assertTrue(self.fs.is_dir('/dir'))
        self.assertFalse(self.fs.is_file('/dir'))
        self.assertEqual(directory.mode, 0o040755)
        self.assertEqual(directory.metadata.uid, 1000)
        self.assertEqual(directory.metadata.gid, 100)

    def test_create_dir_exists(self):
        """Test creating an existing directory."""
        self.fs.create_dir('/dir')
        with self.assertRaises(AlreadyExistsError):
            self.fs.create_dir('/dir')
        with self.assertRaises(AlreadyExistsError):
            self.fs.create_dir('/')

    def test_create_dir_missing_parent(self):
        """Test non-recursive creation under a missing parent."""
        with self.assertRaises(NotFoundError):
            self.fs.create_dir('/a/b')
        self.assertFalse(self.fs.has_node_at('/a'))

    def test_create_dir_recursive(self):
        """Test recursive creation of missing ancestors."""
        leaf = self.fs.create_dir('/a/b/c', recursive=True, mode=0o700)

        self.assertTrue(self.fs.is_dir('/a'))
        self.assertTrue(self.fs.is_dir('/a/b'))
        self.assertIs(self.fs.node_at('/a/b/c'), leaf)
        self.assertEqual(leaf.mode, 0o040700)
        self.assertEqual(self.fs.node_at('/a').mode, 0o040755)

    def test_create_dir_recursive_existing_ancestors(self):
        """Test that existing ancestors never fail a recursive creation."""
        self.fs.create_dir('/a')
        self.fs.create_dir('/a/b/c', recursive=True)
        self.assertTrue(self.fs.is_dir('/a/b/c'))

        with self.assertRaises(AlreadyExistsError):
            self.fs.create_dir('/a/b/c', recursive=True)

    def test_create_dir_recursive_file_ancestor(self):
        """Test that a file in the ancestor chain stops recursive creation."""
        self.fs.create_dir('/a')
        self.fs.create_file('/a/file')

        with self.assertRaises(NotFoundError) as ctx:
            self.fs.create_dir('/a/file/b/c', recursive=True)

        self.assertEqual(ctx.exception.path, '/a/file')
        self.assertEqual(ctx.exception.component, 'file')
        self.assertFalse(self.fs.has_node_at('/a/file/b'))

    def test_create_file(self):
        """Test file creation."""
        self.fs.create_dir('/dir')
        file = self.fs.create_file('/dir/file', b'data')

        self.assertIsInstance(file, File)
        self.assertTrue(self.fs.is_file('/dir/file'))
        self.assertEqual(file.data, b'data')
        self.assertEqual(file.mode, 0o100644)
        self.assertEqual(file.metadata.atime, file.metadata.mtime)
        self.assertEqual(file.metadata.mtime, file.metadata.ctime)

    def test_create_file_errors(self):
        """Test file creation failures."""
        self.fs.create_file('/file')

        with self.assertRaises(AlreadyExistsError):
            self.fs.create_file('/file')
        with self.assertRaises(NotFoundError):
            self.fs.create_file('/missing/file')
        with self.assertRaises(NotFoundError):
            self.fs.create_file('/file/child')

    def test_create_updates_parent_times(self):
        """Test that adding an entry updates the parent's mtime and ctime."""
        directory = self.fs.create_dir('/dir')
        directory.metadata.set_times(10, 10, 10)

        self.fs.create_file('/dir/file')

        self.assertEqual(directory.metadata.atime, 10)
        self.assertGreater(directory.metadata.mtime, 10)
        self.assertGreater(directory.metadata.ctime, 10)

    def test_config_defaults(self):
        """Test permissions and ownership taken from the configuration."""
        fs = Container(FilesystemConfig(
            default_file_mode=0o600,
            default_dir_mode=0o700,
            default_uid=7,
            default_gid=8,
        ))

        file = fs.create_file('/file')
        self.assertEqual(file.mode, 0o100600)
        self.assertEqual((file.metadata.uid, file.metadata.gid), (7, 8))
        self.assertEqual(fs.create_dir('/dir').mode, 0o040700)

    def test_global_config(self):
        """Test that a container without configuration uses the global one."""
        loader = ConfigLoader()
        loader.reset()
        try:
            loader.set('filesystem.default_file_mode', 0o640)
            fs = Container()
            self.assertEqual(fs.create_file('/file').mode, 0o100640)
        finally:
            loader.reset()

    def test_inode_numbers(self):
        """Test that attached nodes get distinct inode numbers."""
        a = self.fs.create_dir('/a')
        b = self.fs.create_file('/a/b')

        self.assertEqual(self.fs.root.ino, 1)
        self.assertEqual(len({self.fs.root.ino, a.ino, b.ino}), 3)
        self.assertEqual(b.parent_ino, a.ino)
        self.assertIs(self.fs.parent_of(b), a)
        self.assertIsNone(self.fs.parent_of(self.fs.root))
        self.assertEqual(self.fs.path_of(b), '/a/b')
        self.assertEqual(self.fs.path_of(self.fs.root), '/')


class TestParentSegments(unittest.TestCase):
    """Test paths with .. segments against the tree."""

    def setUp(self):
        self.fs = make_container()
        self.fs.create_dir('/dir')
        self.fs.create_file('/file')

    def test_existence(self):
        """Test lookups through missing, file and directory segments."""
        self.assertFalse(self.fs.has_node_at('/missing/../dir'))
        self.assertFalse(self.fs.has_node_at('/file/../dir'))
        self.assertTrue(self.fs.has_node_at('/dir/../dir'))

    def test_create_file(self):
        """Test file creation through .. segments."""
        with self.assertRaises(NotFoundError):
            self.fs.create_file('/file/../new')
        with self.assertRaises(NotFoundError):
            self.fs.create_file('/missing/../new')
        self.assertFalse(self.fs.has_node_at('/new'))

        self.fs.create_file('/dir/../new')
        self.assertTrue(self.fs.is_file('/new'))

        with self.assertRaises(AlreadyExistsError):
            self.fs.create_file('/dir/..')

    def test_create_dir(self):
        """Test directory creation through .. segments."""
        with self.assertRaises(NotFoundError):
            self.fs.create_dir('/nope/../made')
        with self.assertRaises(NotFoundError):
            self.fs.create_dir('/file/../made')
        self.assertFalse(self.fs.has_node_at('/made'))
        self.assertFalse(self.fs.has_node_at('/nope'))

        self.fs.create_dir('/dir/../made')
        self.assertTrue(self.fs.is_dir('/made'))

    def test_create_dir_recursive(self):
        """Test recursive creation with .. segments."""
        self.fs.create_dir('/a/../b/c', recursive=True)
        self.assertTrue(self.fs.is_dir('/a'))
        self.assertTrue(self.fs.is_dir('/b/c'))

        with self.assertRaises(NotFoundError):
            self.fs.create_dir('/file/../x', recursive=True)
        with self.assertRaises(InvalidOperationError):
            self.fs.create_dir('/new/..', recursive=True)
        self.assertFalse(self.fs.has_node_at('/x'))

    def test_root_through_parent_segments(self):
        """Test that the root cannot be removed or moved by another name."""
        with self.assertRaises(InvalidOperationError):
            self.fs.remove('/dir/..')
        with self.assertRaises(InvalidOperationError):
            self.fs.move('/..', '/dir/root')
        with self.assertRaises(InvalidOperationError):
            self.fs.move('/file', '/dir/..')
        self.assertTrue(self.fs.is_file('/file'))

    def test_move(self):
        """Test moves with .. in either path."""
        self.fs.move('/dir/../file', '/dir/../dir/moved')
        self.assertTrue(self.fs.is_file('/dir/moved'))

        with self.assertRaises(NotFoundError):
            self.fs.move('/dir/moved', '/missing/../moved')


class TestListingAndStat(unittest.TestCase):
    """Test directory listing and stat."""

    def setUp(self):
        self.fs = make_container()

    def test_list_dir(self):
        """Test listing in insertion order."""
        self.fs.create_dir('/dir')
        self.fs.create_file('/dir/b')
        self.fs.create_file('/dir/a')
        self.fs.create_dir('/dir/c')

        self.assertEqual(self.fs.list_dir('/dir'), ['b', 'a', 'c'])

    def test_list_dir_errors(self):
        """Test listing a file or a missing path."""
        self.fs.create_file('/file')

        with self.assertRaises(InvalidOperationError):
            self.fs.list_dir('/file')
        with self.assertRaises(NotFoundError):
            self.fs.list_dir('/missing')

    def test_stat_file(self):
        """Test stat on a file."""
        file = self.fs.create_file('/file', b'hello', mode=0o600)

        stat = self.fs.stat('/file')

        self.assertEqual(stat.mode, 0o100600)
        self.assertEqual(stat.size, 5)
        self.assertEqual(stat.uid, 1000)
        self.assertEqual(stat.gid, 100)
        self.assertEqual(stat.ino, file.ino)
        self.assertEqual(stat.nlink, 1)
        self.assertEqual(stat.mtime, file.metadata.mtime)

    def test_stat_directory(self):
        """Test stat on a directory."""
        self.fs.create_dir('/dir/sub', recursive=True)
        self.fs.create_file('/dir/file')

        stat = self.fs.stat('/dir')

        self.assertTrue(stat.is_directory)
        self.assertEqual(stat.permissions, 0o755)
        self.assertEqual(stat.nlink, 3)

    def test_stat_missing(self):
        """Test stat on a missing path."""
        with self.assertRaises(NotFoundError):
            self.fs.stat('/missing')


class TestRemoval(unittest.TestCase):
    """Test node removal."""

    def setUp(self):
        self.fs = make_container()
        self.fs.create_dir('/dir/sub', recursive=True)
        self.fs.create_file('/dir/sub/file', b'x')

    def test_remove_file(self):
        """Test removing a file."""
        file = self.fs.node_at('/dir/sub/file')

        self.fs.remove('/dir/sub/file')

        self.assertFalse(self.fs.has_node_at('/dir/sub/file'))
        self.assertEqual(self.fs.list_dir('/dir/sub'), [])
        self.assertFalse(file.attached)

    def test_remove_non_empty(self):
        """Test removing a non-empty directory."""
        with self.assertRaises(DirectoryNotEmptyError) as ctx:
            self.fs.remove('/dir')

        self.assertIsInstance(ctx.exception, InvalidOperationError)
        self.assertEqual(ctx.exception.entries, 1)
        self.assertTrue(self.fs.has_node_at('/dir/sub/file'))

    def test_remove_recursive(self):
        """Test removing a subtree."""
        file = self.fs.node_at('/dir/sub/file')

        self.fs.remove('/dir', recursive=True)

        self.assertFalse(self.fs.has_node_at('/dir'))
        self.assertEqual(self.fs.list_dir('/'), [])
        self.assertIsNone(file.ino)

    def test_remove_errors(self):
        """Test removal failures."""
        with self.assertRaises(InvalidOperationError):
            self.fs.remove('/')
        with self.assertRaises(NotFoundError):
            self.fs.remove('/missing')

    def test_recreate_after_remove(self):
        """Test that a removed name can be reused."""
        self.fs.remove('/dir', recursive=True)
        self.fs.create_file('/dir')
        self.assertTrue(self.fs.is_file('/dir'))


class TestMove(unittest.TestCase):
    """Test moving and renaming nodes."""

    def setUp(self):
        self.fs = make_container()
        self.fs.create_dir('/src/inner', recursive=True)
        self.fs.create_dir('/dst')
        self.fs.create_file('/src/file', b'data')

    def test_rename(self):
        """Test renaming within a directory."""
        file = self.fs.node_at('/src/file')

        moved = self.fs.move('/src/file', '/src/renamed')

        self.assertIs(moved, file)
        self.assertEqual(file.name, 'renamed')
        self.assertFalse(self.fs.has_node_at('/src/file'))
        self.assertEqual(self.fs.node_at('/src/renamed').data, b'data')

    def test_move_directory(self):
        """Test moving a directory with its content."""
        self.fs.move('/src', '/dst/moved')

        self.assertFalse(self.fs.has_node_at('/src'))
        self.assertTrue(self.fs.is_dir('/dst/moved/inner'))
        self.assertTrue(self.fs.is_file('/dst/moved/file'))
        self.assertEqual(self.fs.path_of(self.fs.node_at('/dst/moved/file')), '/dst/moved/file')

    def test_move_timestamps(self):
        """Test that a move updates the node's ctime and both parents."""
        file = self.fs.node_at('/src/file')
        src = self.fs.node_at('/src')
        dst = self.fs.node_at('/dst')
        for node in (file, src, dst):
            node.metadata.set_times(10, 10, 10)

        self.fs.move('/src/file', '/dst/file')

        self.assertEqual(file.metadata.mtime, 10)
        self.assertGreater(file.metadata.ctime, 10)
        self.assertGreater(src.metadata.mtime, 10)
        self.assertGreater(dst.metadata.mtime, 10)
        self.assertGreater(dst.metadata.ctime, 10)

    def test_move_errors(self):
        """Test move failures."""
        with self.assertRaises(NotFoundError):
            self.fs.move('/missing', '/dst/x')
        with self.assertRaises(NotFoundError):
            self.fs.move('/src/file', '/missing/x')
        with self.assertRaises(AlreadyExistsError):
            self.fs.move('/src/file', '/dst')
        with self.assertRaises(InvalidOperationError):
            self.fs.move('/', '/dst/root')

    def test_move_into_own_subtree(self):
        """Test that a directory cannot be moved below itself."""
        with self.assertRaises(InvalidOperationError):
            self.fs.move('/src', '/src/inner/src')
        with self.assertRaises(InvalidOperationError):
            self.fs.move('/src', '/src/self')
        self.assertTrue(self.fs.is_dir('/src/inner'))


class TestAddNode(unittest.TestCase):
    """Test attaching factory-built nodes."""

    def setUp(self):
        self.fs = make_container()
        self.fs.create_dir('/dir')

    def test_add_node(self):
        """Test attaching a detached node."""
        file = self.fs.factory().file('file', b'abc')

        self.fs.add_node('/dir', file)

        self.assertTrue(file.attached)
        self.assertIs(self.fs.node_at('/dir/file'), file)
        self.assertEqual(file.metadata.uid, 1000)

    def test_add_node_errors(self):
        """Test attach failures."""
        factory = self.fs.factory()
        self.fs.create_file('/dir/taken')

        with self.assertRaises(NotFoundError):
            self.fs.add_node('/missing', factory.file('f'))
        with self.assertRaises(NotFoundError):
            self.fs.add_node('/dir/taken', factory.file('f'))
        with self.assertRaises(AlreadyExistsError):
            self.fs.add_node('/dir', factory.file('taken'))
        with self.assertRaises(InvalidOperationError):
            self.fs.add_node('/', self.fs.node_at('/dir'))
        with self.assertRaises(InvalidOperationError):
            self.fs.add_node('/dir', factory.directory('a/b'))


class TestMetadataByPath(unittest.TestCase):
    """Test chmod, chown, chgrp and touch through the container."""

    def setUp(self):
        self.fs = make_container()
        self.fs.create_dir('/dir')
        self.file = self.fs.create_file('/dir/file')
        self.file.metadata.set_times(10, 10, 10)

    def test_chmod(self):
        """Test chmod keeps the type tag and changes ctime only."""
        self.fs.chmod('/dir/file', 0o600)

        self.assertEqual(self.file.mode, 0o100600)
        self.assertEqual(self.file.metadata.atime, 10)
        self.assertEqual(self.file.metadata.mtime, 10)
        self.assertGreater(self.file.metadata.ctime, 10)

        self.fs.chmod('/dir', 0o700)
        self.assertEqual(self.fs.stat('/dir').mode, 0o040700)

    def test_chown_chgrp(self):
        """Test ownership changes."""
        self.fs.chown('/dir/file', 0)
        self.fs.chgrp('/dir/file', 0)

        stat = self.fs.stat('/dir/file')
        self.assertEqual((stat.uid, stat.gid), (0, 0))
        self.assertEqual(stat.mtime, 10)
        self.assertGreater(stat.ctime, 10)

    def test_missing_path(self):
        """Test metadata changes on a missing path."""
        with self.assertRaises(NotFoundError):
            self.fs.chmod('/missing', 0o600)
        with self.assertRaises(NotFoundError):
            self.fs.chown('/missing', 0)
        with self.assertRaises(NotFoundError):
            self.fs.chgrp('/missing', 0)

    def test_touch_existing(self):
        """Test touch on an existing node."""
        node = self.fs.touch('/dir/file')

        self.assertIs(node, self.file)
        self.assertGreater(self.file.metadata.atime, 10)
        self.assertGreater(self.file.metadata.mtime, 10)
        self.assertGreater(self.file.metadata.ctime, 10)

    def test_touch_creates(self):
        """Test touch on a missing file."""
        node = self.fs.touch('/dir/new')

        self.assertIsInstance(node, File)
        self.assertEqual(node.data, b'')
        with self.assertRaises(NotFoundError):
            self.fs.touch('/missing/new')


class TestContainerLogging(unittest.TestCase):
    """Test that tree changes are logged."""

    def setUp(self):
        Logger.reset()
        Logger.initialize(level=LogLevel.DEBUG, console=False)

    def tearDown(self):
        Logger.reset()

    def test_debug_records(self):
        """Test debug records for creation, moves and removal."""
        fs = make_container()
        fs.create_dir('/dir')
        fs.move('/dir', '/moved')
        fs.remove('/moved')

        messages = [entry['message'] for entry in Logger.get_logs(subsystem='container')]

        self.assertIn("Created directory", messages)
        self.assertIn("Moved node", messages)
        self.assertIn("Removed node", messages)

        created = Logger.get_logs(subsystem='container')[0]
        self.assertEqual(created['context']['path'], '/dir')


if __name__ == '__main__':
    unittest.main()
