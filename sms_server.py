#!/usr/bin/env python3
"""
Simple web server that relays SMS requests to the OneWaySMS gateway.
"""

import os
import sys
import logging
from logging.handlers import RotatingFileHandler
from string import Template
from flask import Flask, request, jsonify
import yaml
from sms_errors import GatewayError, ValidationError
from sms_gateway import GatewayClient
from sms_types import ClientConfig, CheckStatusInput, SendMessageInput

logger = logging.getLogger(__name__)


def setup_logging(log_file='config/sms_server.log'):
    """Log to stdout and a rotating file next to the config."""
    os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
    handlers = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
    ]
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def load_config(path='config/config.yaml'):
    """Load configuration with environment variable interpolation"""
    with open(path, 'r') as f:
        template = Template(f.read())
        return yaml.safe_load(template.substitute(os.environ))


def build_client(config):
    """Create a gateway client from the 'oneway' config section"""
    oneway = config['oneway']
    return GatewayClient(
        ClientConfig.from_dict(oneway),
        timeout=oneway.get('timeout', 10)
    )


def _split_mobile_no(value):
    if isinstance(value, str):
        return [n.strip() for n in value.split(',') if n.strip()]
    return value if value is not None else []


def create_app(client):
    app = Flask(__name__)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.info(f"Rejected request: {e.message}")
        return jsonify({
            "error": "ValidationError",
            "field": e.field,
            "message": e.message
        }), 400

    @app.errorhandler(GatewayError)
    def handle_gateway_error(e):
        return jsonify({
            "error": e.code.value,
            "message": e.message,
            "status_code": e.status_code
        }), 502

    @app.route('/sms/send', methods=['POST'])
    def send_sms():
        """Send an SMS through the gateway"""
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValidationError("SendMessageInput", "Body", "is invalid")
        sms_input = SendMessageInput(
            message=data.get('message', ''),
            mobile_no=_split_mobile_no(data.get('mobile_no')),
            language_type=data.get('language_type')
        )
        try:
            output = client.send_message(sms_input)
        except (ValidationError, GatewayError):
            raise
        except Exception as e:
            logger.exception(f"Error sending SMS: {e}")
            return jsonify({"error": str(e)}), 500

        return jsonify({"mt_ids": output.mt_ids})

    @app.route('/sms/status/<int(signed=True):mt_id>', methods=['GET'])
    def transaction_status(mt_id):
        """Check delivery status of a sent message"""
        try:
            output = client.check_transaction_status(CheckStatusInput(mt_id=mt_id))
        except (ValidationError, GatewayError):
            raise
        except Exception as e:
            logger.exception(f"Error checking status of MT {mt_id}: {e}")
            return jsonify({"error": str(e)}), 500

        return jsonify({"mt_id": mt_id, "status": output.status.value})

    @app.route('/sms/balance', methods=['GET'])
    def credit_balance():
        """Check remaining credit balance"""
        try:
            output = client.check_credit_balance()
        except GatewayError:
            raise
        except Exception as e:
            logger.exception(f"Error checking credit balance: {e}")
            return jsonify({"error": str(e)}), 500

        return jsonify({"credit_balance": output.credit_balance})

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint"""
        return jsonify({"status": "ok"})

    return app


if __name__ == '__main__':
    setup_logging()
    config = load_config()
    client = build_client(config)

    # Validate required secrets
    if not client.config.api_password:
        logger.error("ERROR: ONEWAY_API_PASSWORD environment variable not set")
        sys.exit(1)

    logger.info("Starting SMS relay server...")
    logger.info(f"Gateway: {client.config.base_url}")
    logger.info(f"Sender ID: {client.config.sender_id}")
    app = create_app(client)
    app.run(
        host=config['server']['host'],
        port=config['server']['port'],
        debug=False
    )
