"""
API Tests for position competency requirement endpoints.
"""
from datetime import timedelta

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework import status

from HR.person.models import PositionCompetencyRequirement
from core.base.test_utils import create_user, create_competency, create_position, add_requirement


class PositionRequirementAPITest(TestCase):
    """Test position competency requirement API endpoints."""

    def setUp(self):
        self.client = APIClient()
        self.user = create_user(email='hr@test.com', name='HR User')
        self.client.force_authenticate(user=self.user)

        self.communication = create_competency('COMM', 'Communication', 'Behavioral')
        self.delegation = create_competency('DELEG', 'Delegation', 'Leadership')
        self.position = create_position('ENG-MGR', 'Engineering Manager')
        self.list_url = f'/hr/person/positions/{self.position.id}/competency-requirements/'

    def test_list_requirements(self):
        add_requirement(self.position, self.delegation, 3)
        add_requirement(self.position, self.communication, 2)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data['data']['results']
        self.assertEqual([r['competency_code'] for r in results], ['COMM', 'DELEG'])
        self.assertEqual(results[1]['required_level'], 3)

    def test_list_requirements_unknown_position(self):
        response = self.client.get('/hr/person/positions/999999/competency-requirements/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['status'], 'error')

    def test_upsert_creates_then_updates(self):
        payload = {'competency_id': self.communication.id, 'required_level': 2}

        response = self.client.post(self.list_url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        requirement_id = response.data['id']

        payload['required_level'] = 4
        response = self.client.post(self.list_url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], requirement_id)
        self.assertEqual(response.data['required_level'], 4)

    def test_upsert_invalid_level(self):
        response = self.client.post(
            self.list_url, {'competency_id': self.communication.id, 'required_level': 9}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('required_level', response.data)
        self.assertFalse(PositionCompetencyRequirement.objects.exists())

    def test_patch_requirement(self):
        requirement = add_requirement(self.position, self.communication, 2)

        response = self.client.patch(
            f'/hr/person/competency-requirements/{requirement.id}/',
            {'is_mandatory': False},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        requirement.refresh_from_db()
        self.assertFalse(requirement.is_mandatory)
        self.assertEqual(requirement.required_level, 2)

    def test_patch_requirement_requires_a_field(self):
        requirement = add_requirement(self.position, self.communication, 2)

        response = self.client.patch(f'/hr/person/competency-requirements/{requirement.id}/', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_stale_requirement_conflicts(self):
        requirement = add_requirement(self.position, self.communication, 2)
        stale = (requirement.updated_at - timedelta(minutes=1)).isoformat()

        response = self.client.patch(
            f'/hr/person/competency-requirements/{requirement.id}/',
            {'required_level': 4, 'expected_updated_at': stale},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        requirement.refresh_from_db()
        self.assertEqual(requirement.required_level, 2)

    def test_delete_requirement(self):
        requirement = add_requirement(self.position, self.communication, 2)

        response = self.client.delete(f'/hr/person/competency-requirements/{requirement.id}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PositionCompetencyRequirement.objects.filter(pk=requirement.id).exists())

    def test_unauthenticated_request_rejected(self):
        client = APIClient()
        response = client.get(self.list_url)
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
