"""
软删除与锁定交互测试
"""
from django.test import TestCase

from recordlock.apps.lockable.exceptions import RecordLocked
from recordlock.apps.lockable.signals import post_restore, post_soft_delete, pre_restore, pre_soft_delete

from .models import RestorableDocument, SoftDeletableDocument, SoftDocument


class SoftDeleteTest(TestCase):

    def test_soft_delete_stamps_marker(self):
        doc = SoftDocument.objects.create(name='Trash Me', locked=False)
        doc.delete()

        stored = SoftDocument.objects.get(pk=doc.pk)
        self.assertIsNotNone(stored.deleted_at)
        self.assertTrue(stored.is_trashed())
        self.assertTrue(doc.is_trashed())
        self.assertFalse(doc.is_dirty())

    def test_restore_clears_marker(self):
        doc = SoftDocument.objects.create(name='Restore Me', locked=False)
        doc.delete()
        doc.restore()

        self.assertIsNone(SoftDocument.objects.get(pk=doc.pk).deleted_at)

    def test_force_delete_removes_row(self):
        doc = SoftDocument.objects.create(name='Gone', locked=False)
        pk = doc.pk
        doc.force_delete()

        self.assertFalse(SoftDocument.objects.filter(pk=pk).exists())

    def test_lifecycle_signals_are_sent(self):
        received = []

        def handler(signal_name):
            def receiver(sender, instance, **kwargs):
                received.append((signal_name, instance.pk))
            return receiver

        receivers = {
            pre_soft_delete: handler('pre_soft_delete'),
            post_soft_delete: handler('post_soft_delete'),
            pre_restore: handler('pre_restore'),
            post_restore: handler('post_restore'),
        }
        for signal, receiver in receivers.items():
            signal.connect(receiver, sender=SoftDocument)
        try:
            doc = SoftDocument.objects.create(name='Signals', locked=False)
            doc.delete()
            doc.restore()
        finally:
            for signal, receiver in receivers.items():
                signal.disconnect(receiver, sender=SoftDocument)

        self.assertEqual([name for name, _ in received], [
            'pre_soft_delete', 'post_soft_delete', 'pre_restore', 'post_restore',
        ])

    def test_unsaved_record_cannot_be_deleted(self):
        with self.assertRaises(ValueError):
            SoftDocument(name='Unsaved').delete()


class LockedSoftDeleteTest(TestCase):

    def test_blocks_soft_deleting_when_locked(self):
        doc = SoftDocument.objects.create(name='Lock Me Softly', locked=True)

        with self.assertRaises(RecordLocked):
            doc.delete()

        self.assertIsNone(SoftDocument.objects.get(pk=doc.pk).deleted_at)
        self.assertIsNone(doc.deleted_at)

    def test_blocks_force_deleting_when_locked(self):
        doc = SoftDocument.objects.create(name='Lock Me Hard', locked=True)

        with self.assertRaises(RecordLocked):
            doc.force_delete()

        self.assertTrue(SoftDocument.objects.filter(pk=doc.pk).exists())

    def test_allows_soft_deleting_when_locked_but_deletion_is_allowed(self):
        doc = SoftDeletableDocument.objects.create(name='Delete Me Softly', locked=True)
        doc.delete()

        self.assertTrue(SoftDeletableDocument.objects.get(pk=doc.pk).is_trashed())

    def test_allows_restoring_when_locked_but_deletion_is_allowed(self):
        doc = SoftDeletableDocument.objects.create(name='Restore Me Again', locked=True)
        doc.delete()

        doc.restore()

        self.assertFalse(SoftDeletableDocument.objects.get(pk=doc.pk).is_trashed())

    def test_restore_policy_mirrors_delete_policy(self):
        doc = SoftDeletableDocument.objects.create(name='Mirror', locked=True)
        self.assertTrue(doc.can_restore_while_locked())

        doc = SoftDocument.objects.create(name='Mirror', locked=True)
        self.assertFalse(doc.can_restore_while_locked())

    def test_blocks_restoring_when_policy_forbids(self):
        doc = SoftDocument.objects.create(name='Stay Deleted', locked=False)
        doc.delete()
        doc.mark_locked()

        with self.assertRaises(RecordLocked):
            doc.restore()

        self.assertTrue(SoftDocument.objects.get(pk=doc.pk).is_trashed())

    def test_restore_allowed_by_explicit_restore_policy(self):
        doc = RestorableDocument.objects.create(name='Restorable', locked=False)
        doc.delete()
        doc.mark_locked()

        self.assertFalse(doc.is_restoring_while_locked())
        doc.restore()

        self.assertFalse(RestorableDocument.objects.get(pk=doc.pk).is_trashed())

    def test_explicit_restore_policy_does_not_grant_delete(self):
        doc = RestorableDocument.objects.create(name='Restorable', locked=True)

        with self.assertRaises(RecordLocked):
            doc.delete()

    def test_restore_with_other_changes_is_blocked(self):
        doc = SoftDeletableDocument.objects.create(name='Sneaky', locked=True)
        doc.delete()

        doc.deleted_at = None
        doc.name = 'Sneaky edit'
        self.assertFalse(doc.is_restoring_while_locked())
        with self.assertRaises(RecordLocked):
            doc.save()

    def test_restoring_detection(self):
        doc = SoftDeletableDocument.objects.create(name='Detect', locked=True)
        doc.delete()

        doc.deleted_at = None
        self.assertTrue(doc.is_restoring_while_locked())
