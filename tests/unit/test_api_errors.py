"""Tests for API error handling."""
import json

import aiohttp

from b2py.core.api.errors import B2APIError


class TestB2APIError:
    """Test suite for B2APIError."""
    
    def test_parses_b2_error_document(self):
        """Test code and message are read from the JSON body."""
        body = json.dumps({'status': 400, 'code': 'bad_request', 'message': 'Nope'})
        error = B2APIError(None, (), status=400, message='Bad Request', body=body)
        
        assert error.status == 400
        assert error.body == body
        assert error.error_code == 'bad_request'
        assert error.error_message == 'Nope'
        assert str(error) == 'B2 API error 400 (bad_request): Nope'
    
    def test_non_json_body_kept(self):
        """Test non-JSON bodies are kept verbatim."""
        error = B2APIError(None, (), status=502, message='Bad Gateway', body='<html>')
        
        assert error.body == '<html>'
        assert error.error_code is None
        assert str(error) == 'B2 API error 502: Bad Gateway'
    
    def test_is_client_response_error(self):
        """Test generic aiohttp handlers catch it."""
        error = B2APIError(None, (), status=500)
        
        assert isinstance(error, aiohttp.ClientResponseError)
    
    def test_raw_body_kept_byte_for_byte(self):
        """Test undecodable bytes survive in raw_body."""
        raw = b'\xff\xfe not utf-8'
        error = B2APIError(None, (), status=500, raw_body=raw)
        
        assert error.raw_body == raw
        assert error.body.endswith(' not utf-8')
    
    def test_text_body_encoded_into_raw_body(self):
        """Test a text body is also available as bytes."""
        error = B2APIError(None, (), status=400, body='{"code": "x"}')
        
        assert error.raw_body == b'{"code": "x"}'
        assert error.error_code == 'x'
