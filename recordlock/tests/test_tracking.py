"""
脏字段追踪测试
"""
from django.test import TestCase

from .models import Attachment, Document


class PersistedStateTest(TestCase):

    def test_new_instance_is_dirty(self):
        doc = Document(name='New')
        self.assertTrue(doc.is_dirty())
        self.assertIn('name', doc.get_dirty_fields())

    def test_created_instance_is_clean(self):
        doc = Document.objects.create(name='Clean')
        self.assertEqual(doc.get_dirty_fields(), set())

    def test_loaded_instance_is_clean(self):
        Document.objects.create(name='Clean')
        doc = Document.objects.get(name='Clean')
        self.assertFalse(doc.is_dirty())

    def test_assignment_marks_field_dirty(self):
        doc = Document.objects.create(name='Before')
        doc.name = 'After'

        self.assertEqual(doc.get_dirty_fields(), {'name'})
        self.assertTrue(doc.is_dirty('name'))
        self.assertFalse(doc.is_dirty('note'))
        self.assertEqual(doc.get_persisted_state()['name'], 'Before')

    def test_assigning_same_value_is_not_dirty(self):
        doc = Document.objects.create(name='Same')
        doc.name = 'Same'
        self.assertFalse(doc.is_dirty())

    def test_save_resets_state(self):
        doc = Document.objects.create(name='Before')
        doc.name = 'After'
        doc.save()
        self.assertFalse(doc.is_dirty())

    def test_partial_save_keeps_other_fields_dirty(self):
        doc = Document.objects.create(name='Before')
        doc.name = 'After'
        doc.note = 'n'
        doc.save(update_fields=['note'])
        self.assertEqual(doc.get_dirty_fields(), {'name'})

    def test_refresh_from_db_resets_state(self):
        doc = Document.objects.create(name='Before')
        doc.name = 'After'
        doc.refresh_from_db()

        self.assertEqual(doc.name, 'Before')
        self.assertFalse(doc.is_dirty())

    def test_deferred_fields_are_ignored_until_loaded(self):
        Document.objects.create(name='Deferred', note='hidden')
        doc = Document.objects.defer('note').get(name='Deferred')
        self.assertFalse(doc.is_dirty())

        self.assertEqual(doc.note, 'hidden')
        self.assertFalse(doc.is_dirty())

    def test_foreign_key_tracked_by_name(self):
        first = Document.objects.create(name='First')
        second = Document.objects.create(name='Second')
        attachment = Attachment.objects.create(document=first, filename='a.pdf')

        attachment.document_id = second.pk
        self.assertEqual(attachment.get_dirty_fields(), {'document'})
        self.assertTrue(attachment.is_dirty('document_id'))
