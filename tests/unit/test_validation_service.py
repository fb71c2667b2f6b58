"""
Validation Service Unit Tests
Tests for request body validation of join and vote requests.
"""

import pytest

from scrumpoker.core.errors import ErrorCode, ValidationError
from scrumpoker.services.validation_service import ValidationService


class TestRequiredFields:
    """Test required field detection"""

    def setup_method(self):
        self.service = ValidationService(max_field_length=20)

    def test_join_requires_name_and_room(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_join_data({'playerName': 'Alice'})

        assert exc_info.value.code == ErrorCode.MISSING_DATA
        assert exc_info.value.message == 'Error! Required JSON fields missing: roomName'
        assert exc_info.value.details == {'missing_fields': ['roomName']}

    def test_empty_strings_count_as_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_join_data({'playerName': '', 'roomName': ''})

        assert exc_info.value.details['missing_fields'] == ['playerName', 'roomName']

    def test_non_object_body_is_missing_everything(self):
        for body in (None, [], 'text'):
            with pytest.raises(ValidationError) as exc_info:
                self.service.validate_join_data(body)
            assert exc_info.value.details['missing_fields'] == ['playerName', 'roomName']

    def test_zero_card_value_is_present(self):
        assert not self.service.is_missing('cardValue', 0)
        assert not self.service.is_missing('cardValue', 0.0)
        assert self.service.is_missing('cardValue', None)
        assert self.service.is_missing('cardValue', '')

    def test_falsy_text_fields_are_missing(self):
        assert self.service.is_missing('playerName', '')
        assert self.service.is_missing('playerName', None)
        assert self.service.is_missing('cardTitle', 0)

    def test_vote_lists_every_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_vote_data({'playerName': 'Bob', 'cardValue': 0})

        assert exc_info.value.details['missing_fields'] == ['playerId', 'roomName', 'cardTitle']
        assert exc_info.value.message == 'Error! Required JSON fields missing: playerId, roomName, cardTitle'


class TestFieldValidation:
    """Test field types and lengths"""

    def setup_method(self):
        self.service = ValidationService(max_field_length=20)

    def test_join_data_is_normalized(self):
        fields = self.service.validate_join_data({'playerName': 'Alice', 'roomName': 'sprint1', 'roomSecret': ''})

        assert fields == {'player_name': 'Alice', 'room_name': 'sprint1', 'room_secret': None}

    def test_join_secret_is_kept(self):
        fields = self.service.validate_join_data({'playerName': 'Alice', 'roomName': 'sprint1', 'roomSecret': 'abc'})
        assert fields['room_secret'] == 'abc'

    def test_text_fields_must_be_strings(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_join_data({'playerName': 42, 'roomName': 'sprint1'})

        assert exc_info.value.code == ErrorCode.INVALID_DATA
        assert exc_info.value.details['field'] == 'playerName'

    def test_text_fields_are_length_limited(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_join_data({'playerName': 'A' * 21, 'roomName': 'sprint1'})

        assert exc_info.value.code == ErrorCode.INVALID_DATA
        assert exc_info.value.details['max_length'] == 20

    def test_vote_data(self):
        fields = self.service.validate_vote_data({
            'playerId': 'p1', 'playerName': 'Bob', 'roomName': 'sprint1',
            'roomSecret': 'abc', 'cardValue': 0, 'cardTitle': 'Zero'
        })

        assert fields == {
            'player_id': 'p1', 'player_name': 'Bob', 'room_name': 'sprint1',
            'room_secret': 'abc', 'card_value': 0, 'card_title': 'Zero'
        }

    def test_symbolic_card_values_are_accepted(self):
        assert self.service.validate_card_value('?') == '?'
        assert self.service.validate_card_value(0.5) == 0.5

    def test_invalid_card_values(self):
        for value in (True, False, [1], {'v': 1}):
            with pytest.raises(ValidationError):
                self.service.validate_card_value(value)

    def test_default_length_limit_without_configuration(self):
        assert ValidationService().max_field_length == ValidationService.DEFAULT_MAX_FIELD_LENGTH

    def test_length_limit_from_configuration(self):
        from config_factory import ConfigurationFactory
        ConfigurationFactory().load_from_dict({'environment': 'testing', 'max_field_length': 7})

        assert ValidationService().max_field_length == 7

    def test_non_finite_card_values_are_rejected(self):
        for value in (float('inf'), float('-inf'), float('nan')):
            with pytest.raises(ValidationError) as exc_info:
                self.service.validate_card_value(value)
            assert exc_info.value.code == ErrorCode.INVALID_DATA
            assert exc_info.value.details == {'field': 'cardValue'}
